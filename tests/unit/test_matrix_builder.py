"""Unit tests for matrix building and statistics."""

import logging

import pytest
from pydantic import ValidationError

from tab_matrix.errors import InvalidInputError
from tab_matrix.grouping import (
    build,
    create_matrices,
    filter_by_ids,
    get_statistics,
    group_by_domain,
    sort_by_url_count,
)
from tab_matrix.models import UrlEntry, UrlMatrix


def _entries(domain: str, count: int) -> list[UrlEntry]:
    return [
        UrlEntry(
            url=f"https://{domain}/{i}",
            normalized_url=f"https://{domain}/{i}",
            domain=domain,
        )
        for i in range(count)
    ]


def _matrix(label: str, count: int) -> UrlMatrix:
    return create_matrices({label: _entries(label, count)})[0]


class TestBuild:
    """Test suite for build."""

    def test_single_domain(self):
        """Test one domain produces one fully populated matrix."""
        matrices = build(_entries("example.com", 1))

        assert len(matrices) == 1
        matrix = matrices[0]
        assert matrix.id == "matrix-domain-example-com"
        assert matrix.label == "example.com"
        assert matrix.criterion == "domain"
        assert matrix.criterion_value == "example.com"
        assert matrix.url_count == 1
        assert matrix.urls[0].matrix_id == matrix.id

    def test_sorted_by_count_descending(self):
        """Test larger matrices come first."""
        matrices = build(_entries("a.com", 2) + _entries("b.com", 5))
        assert [(m.label, m.url_count) for m in matrices] == [("b.com", 5), ("a.com", 2)]

    def test_ties_keep_partition_order(self):
        """Test equal counts keep the order domains were first encountered."""
        entries = _entries("z.com", 2) + _entries("big.com", 3) + _entries("a.com", 2)

        matrices = build(entries)

        assert [m.label for m in matrices] == ["big.com", "z.com", "a.com"]

    def test_bucket_order_follows_input(self):
        """Test entries keep their relative order inside a matrix."""
        a = _entries("a.com", 3)
        b = _entries("b.com", 1)
        entries = [a[2], b[0], a[0], a[1]]

        matrix = build(entries)[0]

        assert [e.url for e in matrix.urls] == [a[2].url, a[0].url, a[1].url]

    def test_shared_timestamp(self):
        """Test every matrix from one call carries the same created_at."""
        matrices = build(_entries("a.com", 1) + _entries("b.com", 1) + _entries("c.com", 1))
        assert len({m.created_at for m in matrices}) == 1

    def test_missing_domain_dropped(self, caplog):
        """Test entries without a domain are excluded with a warning."""
        entries = _entries("a.com", 2) + [
            UrlEntry(url="https://x/", normalized_url="https://x/", domain="")
        ]

        with caplog.at_level(logging.WARNING):
            matrices = build(entries)

        assert [m.label for m in matrices] == ["a.com"]
        assert "URL without domain" in caplog.text

    def test_conservation(self):
        """Test matrix sizes add up to the entries that have a domain."""
        entries = (
            _entries("a.com", 3)
            + _entries("b.com", 4)
            + [UrlEntry(url="u", normalized_url="u", domain="")]
        )

        matrices = build(entries)

        assert sum(m.url_count for m in matrices) == 7

    def test_input_entries_not_mutated(self):
        """Test stamping matrix IDs leaves the input entries untouched."""
        entries = _entries("a.com", 2)
        build(entries)
        assert all(e.matrix_id is None for e in entries)

    def test_empty(self):
        """Test empty input yields no matrices."""
        assert build([]) == []

    def test_non_sequence_rejected(self):
        with pytest.raises(InvalidInputError):
            build("a.com")

    def test_ids_stable_across_runs(self):
        """Test rebuilding the same entries gives the same IDs."""
        entries = _entries("a.com", 1) + _entries("b.org", 2)
        assert [m.id for m in build(entries)] == [m.id for m in build(entries)]


class TestStages:
    """Tests for the individual grouping stages."""

    def test_group_by_domain_order(self):
        entries = _entries("b.com", 1) + _entries("a.com", 1) + _entries("b.com", 1)
        grouped = group_by_domain(entries)
        assert list(grouped) == ["b.com", "a.com"]
        assert len(grouped["b.com"]) == 2

    def test_create_matrices_explicit_timestamp(self):
        matrices = create_matrices({"a.com": _entries("a.com", 1)}, created_at="2024-01-01T00:00:00+00:00")
        assert matrices[0].created_at == "2024-01-01T00:00:00+00:00"

    def test_sort_is_stable(self):
        matrices = [_matrix("a.com", 1), _matrix("b.com", 3), _matrix("c.com", 1)]
        assert [m.label for m in sort_by_url_count(matrices)] == ["b.com", "a.com", "c.com"]


class TestMatrixInvariants:
    """Tests for model-level matrix invariants."""

    def test_count_mismatch_rejected(self):
        entries = [e.model_copy(update={"matrix_id": "m"}) for e in _entries("a.com", 2)]
        with pytest.raises(ValidationError):
            UrlMatrix(
                id="m", label="a.com", criterion_value="a.com", url_count=3, urls=entries, created_at="t"
            )

    def test_foreign_entry_rejected(self):
        entries = _entries("a.com", 1)
        with pytest.raises(ValidationError):
            UrlMatrix(
                id="m", label="a.com", criterion_value="a.com", url_count=1, urls=entries, created_at="t"
            )

    def test_camel_case_serialization(self):
        data = _matrix("a.com", 1).model_dump(by_alias=True)
        assert data["urlCount"] == 1
        assert data["criterionValue"] == "a.com"
        assert data["urls"][0]["normalizedUrl"] == "https://a.com/0"
        assert data["urls"][0]["matrixId"] == "matrix-domain-a-com"


class TestFilterByIds:
    """Test suite for filter_by_ids."""

    @pytest.fixture
    def matrices(self):
        return [_matrix("a.com", 3), _matrix("b.com", 2), _matrix("c.com", 1)]

    def test_empty_ids_returns_all(self, matrices):
        assert filter_by_ids(matrices, []) == matrices
        assert filter_by_ids(matrices, None) == matrices

    def test_unknown_id(self, matrices):
        assert filter_by_ids(matrices, ["nonexistent"]) == []

    def test_preserves_original_order(self, matrices):
        selected = filter_by_ids(matrices, ["matrix-domain-c-com", "matrix-domain-a-com"])
        assert [m.label for m in selected] == ["a.com", "c.com"]


class TestGetStatistics:
    """Test suite for get_statistics."""

    def test_counts(self):
        """Test aggregates for counts [5, 3, 3]."""
        matrices = [_matrix("a.com", 5), _matrix("b.com", 3), _matrix("c.com", 3)]

        stats = get_statistics(matrices)

        assert stats.total_matrices == 3
        assert stats.total_urls == 11
        assert stats.avg_urls_per_matrix == 3.67
        assert stats.max_urls_in_matrix == 5
        assert stats.min_urls_in_matrix == 3
        assert stats.domains == ["a.com", "b.com", "c.com"]

    def test_average_tie_rounds_up(self):
        """Test a mean landing exactly on a half cent rounds up (13 / 8 = 1.625)."""
        counts = [3, 2, 2, 2, 1, 1, 1, 1]
        matrices = [_matrix(f"site{i}.com", count) for i, count in enumerate(counts)]

        assert get_statistics(matrices).avg_urls_per_matrix == 1.63

    def test_empty(self):
        """Test all aggregates are zero without matrices."""
        stats = get_statistics([])

        assert stats.total_matrices == 0
        assert stats.total_urls == 0
        assert stats.avg_urls_per_matrix == 0
        assert stats.max_urls_in_matrix == 0
        assert stats.min_urls_in_matrix == 0
        assert stats.domains == []
