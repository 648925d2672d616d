"""
FastAPI server for tab analysis and export.

Each app instance owns a ``SessionStore``; an analysis is stored in its
session so a later export works from the same matrices.
"""

import logging
from contextlib import asynccontextmanager
from typing import Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from tab_matrix.api.models import (
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
    ExportRequest,
)
from tab_matrix.api.sessions import SessionStore
from tab_matrix.errors import ErrorKind, Failure
from tab_matrix.logging_config import setup_logging

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.INVALID_INPUT: 422,
    ErrorKind.EMPTY_RESULT: 422,
    ErrorKind.INVALID_FORMAT: 400,
    ErrorKind.NO_MATRICES_AVAILABLE: 409,
    ErrorKind.MATRIX_NOT_FOUND: 404,
    ErrorKind.SESSION_NOT_FOUND: 404,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    logger.info("Starting up: Tab Matrix API")

    yield

    # Shutdown
    logger.info("Shutting down (sessions=%d)", len(app.state.sessions))


def create_app() -> FastAPI:
    """Build the application."""
    app = FastAPI(
        title="Tab Matrix API",
        description="Tabs → deduplicated, domain-grouped URL matrices",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.sessions = SessionStore()

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "message": "Tab Matrix API is running"}

    @app.post(
        "/v1/analyze",
        response_model=AnalyzeResponse,
        responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    )
    async def analyze_tabs(
        body: AnalyzeRequest, request: Request
    ) -> Union[AnalyzeResponse, JSONResponse]:
        """
        Analyze tabs and store the result in a session.

        Returns:
            AnalyzeResponse with sorted matrices and statistics

        Raises:
            404: If the given session does not exist
            422: If tabs is not a list or yields no usable URL
        """
        sessions: SessionStore = request.app.state.sessions

        if body.session_id:
            session = sessions.get(body.session_id)
            if session is None:
                return _error(
                    Failure(ErrorKind.SESSION_NOT_FOUND, f"Session not found: {body.session_id}")
                )
        else:
            session = sessions.create()

        result = session.analyze(body.tabs)
        if not result.ok:
            logger.warning("Analysis failed: %s", result.error.message)
            return _error(result.error)

        report = result.value
        return AnalyzeResponse(
            session_id=session.session_id,
            matrices=report.matrices,
            statistics=report.statistics,
            processing_time_ms=report.processing_time_ms,
        )

    @app.post(
        "/v1/export",
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
    )
    async def export_matrices(body: ExportRequest, request: Request) -> Response:
        """
        Export matrices from an analyzed session as a file download.

        Raises:
            400: Unknown format
            404: Unknown session or no matching matrix IDs
            409: Session has not been analyzed yet
        """
        sessions: SessionStore = request.app.state.sessions
        session = sessions.get(body.session_id)
        if session is None:
            return _error(
                Failure(ErrorKind.SESSION_NOT_FOUND, f"Session not found: {body.session_id}")
            )

        result = session.prepare_export(body.matrix_ids, body.format)
        if not result.ok:
            logger.warning("Export failed: %s", result.error.message)
            return _error(result.error)

        artifact = result.value
        return Response(
            content=artifact.content,
            media_type=artifact.mime_type,
            headers={
                "Content-Disposition": f'attachment; filename="{artifact.filename}"',
                "X-Export-Type": artifact.export_type.value,
                "X-Exported-Matrices": str(artifact.exported_matrices),
                "X-Exported-Urls": str(artifact.exported_urls),
            },
        )

    @app.delete("/v1/sessions/{session_id}")
    async def delete_session(session_id: str, request: Request):
        """Discard a session and its results."""
        sessions: SessionStore = request.app.state.sessions
        if not sessions.remove(session_id):
            return _error(Failure(ErrorKind.SESSION_NOT_FOUND, f"Session not found: {session_id}"))
        return {"status": "success", "sessionId": session_id}

    return app


def _error(failure: Failure) -> JSONResponse:
    status_code = ERROR_STATUS.get(failure.kind, 500)
    body = ErrorResponse(error=failure.message, code=failure.kind.value)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


app = create_app()


def main(host: str = "127.0.0.1", port: int = 8000):
    """Run the server (for development)."""
    import uvicorn

    setup_logging()
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
