"""Static assets and single-page application fallback."""

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from ergtracking.api.dependencies import get_app_settings
from ergtracking.core.config import Settings
from ergtracking.core.exceptions import NotFoundException

router = APIRouter(tags=["web-ui"])

INDEX_DOCUMENT = "index.html"


def resolve_asset(static_dir: str | Path, path: str) -> Path | None:
    """Map a request path to a file inside the static directory.

    Returns None for missing files and for paths escaping the directory.
    """
    root = Path(static_dir).resolve()
    candidate = (root / path.lstrip("/")).resolve()

    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


@router.get("/{full_path:path}", include_in_schema=False)
async def spa(
    full_path: str,
    settings: Settings = Depends(get_app_settings),
) -> FileResponse:
    """Serve a built asset, or the application entry document."""
    asset = resolve_asset(settings.static_dir, full_path) if full_path else None
    if asset is None:
        asset = resolve_asset(settings.static_dir, INDEX_DOCUMENT)
    if asset is None:
        raise NotFoundException("application entry document not found")
    return FileResponse(asset)
