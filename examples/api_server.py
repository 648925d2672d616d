"""
Example: API Server

Demonstrates running the FastAPI server for tab analysis and export.

Start the server and query it:
```bash
# Start the server
python examples/api_server.py

# In another terminal, analyze tabs and export the result:
curl -X POST http://localhost:8000/v1/analyze \
    -H 'Content-Type: application/json' \
    -d '{"tabs": [{"url": "https://github.com/a"}, {"url": "https://example.org/"}]}'
curl -X POST http://localhost:8000/v1/export \
    -H 'Content-Type: application/json' \
    -d '{"sessionId": "<sessionId from above>", "format": "txt"}'
```
"""

from tab_matrix.logging_config import setup_logging


def main():
    """Run the API server."""
    import uvicorn

    from tab_matrix.api.server import app

    setup_logging()

    print("=" * 80)
    print("Starting Tab Matrix API Server")
    print("=" * 80)
    print()
    print("Endpoints:")
    print("  GET    /                       health check")
    print("  POST   /v1/analyze             analyze tabs into matrices")
    print("  POST   /v1/export              download an export")
    print("  DELETE /v1/sessions/{id}       discard a session")
    print()

    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")


if __name__ == "__main__":
    main()
