"""
Static asset serving for the public root.

Maps URL paths onto files below the public root, rejects anything that
normalises to a location outside it, and derives Content-Type from a fixed
extension table.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Union

from fastapi.responses import JSONResponse, PlainTextResponse, Response

from core.error_handling import ForbiddenPathError

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT = "index.html"
FAVICON_PATH = "/favicon.ico"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

MIME_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".svg": "image/svg+xml",
    ".txt": "text/plain; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".ico": "image/x-icon",
    ".pdf": "application/pdf",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def content_type_for(path: Union[str, Path]) -> str:
    """Content-Type for ``path`` by extension, octet-stream when unknown."""
    return MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_static_path(public_dir: Union[str, Path], url_path: str) -> Path:
    """
    Map a decoded URL path to a file path under ``public_dir``.

    The root path maps to the default document. Normalisation is lexical, so
    ``..`` segments are collapsed before the containment check.

    Raises:
        ForbiddenPathError: if the path escapes the public root
    """
    root = os.path.normpath(os.path.abspath(str(public_dir)))

    if url_path in ("", "/"):
        relative = DEFAULT_DOCUMENT
    else:
        relative = url_path.lstrip("/")

    if "\x00" in relative:
        raise ForbiddenPathError(
            "Null byte in static path", component="static_files",
            context={"path": url_path},
        )

    requested = os.path.normpath(os.path.join(root, relative))

    if requested != root and os.path.commonpath([root, requested]) != root:
        raise ForbiddenPathError(
            "Static path escapes public root", component="static_files",
            context={"path": url_path},
        )

    return Path(requested)


async def serve_static(public_dir: Union[str, Path], url_path: str) -> Response:
    """Build the response for a non-API request."""
    try:
        file_path = resolve_static_path(public_dir, url_path)
    except ForbiddenPathError as e:
        logger.warning(f"Blocked static path traversal: {e.context.get('path')!r}")
        return PlainTextResponse(e.public_message, status_code=e.status_code)

    if url_path == FAVICON_PATH and not file_path.is_file():
        return Response(status_code=204)

    try:
        data = await asyncio.to_thread(file_path.read_bytes)
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        return JSONResponse({"error": "Not found"}, status_code=404)
    except OSError as e:
        logger.error(f"Failed to serve static file {file_path}: {e}")
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    return Response(content=data, media_type=content_type_for(file_path))
