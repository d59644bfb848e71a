"""Client bundle routes."""

from __future__ import annotations

from flask import send_from_directory

from ...errors import NotFoundError
from ...extensions import get_services
from . import bp


@bp.get("/", defaults={"path": ""})
@bp.get("/<path:path>")
def serve_client(path: str):
    """Return a bundle asset, or index.html so client-side routing can take over."""

    if path == "api" or path.startswith("api/"):
        raise NotFoundError("API route not found")

    build_dir = get_services().config.CLIENT_BUILD_DIR.resolve()
    if path and (build_dir / path).is_file():
        return send_from_directory(build_dir, path)
    return send_from_directory(build_dir, "index.html")
