"""
Basic analysis example.

Demonstrates URL canonicalization, deduplication and domain matrices.
"""

import polars as pl

from tab_matrix import analyze
from tab_matrix.export import export_matrices, summary_frame
from tab_matrix.normalization import generate_matrix_id, get_url_id, normalize_url


def main():
    """Run basic analysis example."""
    print("=" * 60)
    print("Tab Matrix: Basic Analysis Example")
    print("=" * 60)

    # Example 1: Canonicalize a single URL
    print("\n1. Single URL Canonicalization")
    print("-" * 60)

    raw_url = "HTTPS://WWW.Example.COM:443/path/../clean/?z=1&utm_source=mail&a=2#fragment"
    print(f"Raw URL:       {raw_url}")
    print(f"Canonical URL: {normalize_url(raw_url)}")

    # Example 2: Analyze a batch of tabs
    print("\n\n2. Tab Analysis")
    print("-" * 60)

    tabs = [
        {"url": "https://github.com/pola-rs/polars", "title": "polars"},
        {"url": "https://www.github.com/pola-rs/polars/?utm_source=hn"},
        {"url": "https://github.com/pydantic/pydantic", "title": "pydantic"},
        {"url": "https://docs.python.org/3/library/urllib.parse.html#url-parsing"},
        {"url": "https://docs.python.org/3/library/urllib.parse.html"},
        {"url": "https://news.ycombinator.com/"},
        {"url": "not a url"},
    ]
    print(f"Input: {len(tabs)} tabs")

    report = analyze(tabs).unwrap()

    print(f"Valid URLs:  {report.normalized_count}")
    print(f"Unique URLs: {report.unique_count}")
    print("\nMatrices:")
    with pl.Config(fmt_str_lengths=80):
        print(summary_frame(report.matrices))

    stats = report.statistics
    print(f"\nAverage URLs per matrix: {stats.avg_urls_per_matrix}")
    print(f"Largest matrix: {stats.max_urls_in_matrix}, smallest: {stats.min_urls_in_matrix}")

    # Example 3: Plain-text export
    print("\n\n3. Plain-text Export")
    print("-" * 60)
    print(export_matrices(report.matrices, "txt-simple"))

    # Example 4: ID generation
    print("\n4. ID Generation")
    print("-" * 60)

    url = "https://example.com/page"
    print(f"URL: {url}")
    print(f"  URL ID: {get_url_id(url)}")
    print(f"  Same ID on repeat: {get_url_id(url) == get_url_id(url)}")
    print(f"\nMatrix ID for 'docs.python.org': {generate_matrix_id('docs.python.org')}")

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
