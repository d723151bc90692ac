"""
mock_catalog.daemon
-------------------
This module implements a mock model catalog REST API using FastAPI.
It serves a local directory of model documents in the same shape as
the GitHub contents API (listing) and raw file downloads, so the GitHub
connector can be pointed at it for local development, testing,
and demonstration purposes.

Point the viewer at it with:
    SUNVIEW_API_BASE_URL=http://127.0.0.1:<port>
    SUNVIEW_RAW_BASE_URL=http://127.0.0.1:<port>/raw
"""
import json
import logging
import os
import socket
from pathlib import Path

import typer
import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel

from common.app_setup import setup_logging

logger = logging.getLogger(__name__)


# Output model for one listing entry (subset of the GitHub contents API)
class ContentEntry(BaseModel):
    name: str
    path: str
    type: str
    size: int
    download_url: str | None = None


def _models_dir(request: Request) -> Path:
    return request.app.state.models_dir


def create_app(models_dir: str | Path) -> FastAPI:
    """Build the mock catalog app serving ``models_dir``."""
    app = FastAPI()
    app.state.models_dir = Path(models_dir)

    @app.post("/shutdown")
    def shutdown(request: Request):
        """Shutdown the server gracefully."""
        logger.info("Shutdown requested via /shutdown endpoint.")
        server = getattr(request.app.state, "uvicorn_server", None)
        if server:
            server.should_exit = True
        return {"message": "Server shutting down"}

    @app.get("/status")
    def status(request: Request):
        """Health/status endpoint for the mock catalog daemon."""
        models_dir = _models_dir(request)
        documents = len(list(models_dir.glob("*.json"))) if models_dir.is_dir() else 0
        return {"status": "ok", "models_dir": str(models_dir), "documents": documents}

    @app.get("/repos/{owner}/{repo}/contents/{path:path}", response_model=list[ContentEntry])
    def list_contents(owner: str, repo: str, path: str, request: Request, ref: str = "master") -> list[ContentEntry]:
        """List every file and directory of the served folder, like the contents API."""
        models_dir = _models_dir(request)
        logger.info(f"Listing {owner}/{repo}/{path} at {ref}")
        if not models_dir.is_dir():
            logger.warning(f"Models directory not found: {models_dir}")
            raise HTTPException(status_code=404, detail="Not Found")
        base = str(request.base_url).rstrip("/")
        entries = []
        for item in sorted(models_dir.iterdir()):
            is_file = item.is_file()
            entries.append(ContentEntry(
                name=item.name,
                path=f"{path}/{item.name}",
                type="file" if is_file else "dir",
                size=item.stat().st_size if is_file else 0,
                download_url=f"{base}/raw/{owner}/{repo}/{ref}/{path}/{item.name}" if is_file else None,
            ))
        return entries

    @app.get("/raw/{owner}/{repo}/{branch}/{path:path}")
    def raw_file(owner: str, repo: str, branch: str, path: str, request: Request) -> Response:
        """Return one file of the served folder as is."""
        name = Path(path).name
        document = _models_dir(request) / name
        if not document.is_file():
            logger.warning(f"Document not found: {path}")
            raise HTTPException(status_code=404, detail="Not Found")
        logger.debug(f"Serving {document}")
        media_type = "application/json" if name.endswith(".json") else "text/plain"
        return Response(content=document.read_bytes(), media_type=media_type)

    return app


app = create_app(os.environ.get("SUNVIEW_MOCK_MODELS_DIR", "."))

app_cli = typer.Typer()

@app_cli.command()
def run(port: int = typer.Option(None, help="Port to run the server on (auto if not set)"),
        models_dir: Path = typer.Option(Path("."), help="Directory of model documents to serve")):
    """Run the FastAPI app using Uvicorn on localhost, reporting the actual port used."""
    setup_logging(app_name="sunview", daemon=True)
    app.state.models_dir = models_dir
    if port is None or port == 0:
        # Bind to port 0 to get a free port, then close and reuse
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(('127.0.0.1', 0))
            port = s.getsockname()[1]
        logger.info(f"Selected port: {port}")
        print(json.dumps({"event": "port_selected", "port": port}), flush=True)
    else:
        # Check if port is available
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind(('127.0.0.1', port))
            except OSError:
                logger.error(f"ERROR: Port {port} is already in use.")
                raise typer.Exit(98)  # 98 = EADDRINUSE
        logger.info(f"Using port: {port}")
        print(json.dumps({"event": "port_used", "port": port}), flush=True)
    config = uvicorn.Config(app, host="127.0.0.1", port=port, log_level="info")
    server = uvicorn.Server(config)
    app.state.uvicorn_server = server  # Store server instance for shutdown
    logger.info(f"Serving {models_dir} on port {port}")
    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt in main thread")
    logger.info("Server stopped, exiting process")

if __name__ == "__main__":
    app_cli()
