"""HTML pages and static assets."""
import json
from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter, status
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse

from donezo.api.deps import AppSettings, MaybeAuthenticated
from donezo.errors import NotFound

STATIC_DIR = Path(__file__).resolve().parent.parent.parent / "static"

# Only these files are served; anything else under /static is a 404
STATIC_ASSETS = {
    "app.js": "application/javascript",
    "output.css": "text/css",
}

router = APIRouter(tags=["web"])


@lru_cache
def _load_page(name: str) -> str:
    return (STATIC_DIR / name).read_text(encoding="utf-8")


def inject_base_path(html: str, base_path: str) -> str:
    """
    Make a page work under a URL prefix.

    Sets ``window.BASE_PATH`` for the client script and rewrites absolute
    ``/static/`` references to live under the prefix.
    """
    script = f"<script>window.BASE_PATH = {json.dumps(base_path)};</script>"
    html = html.replace("<head>", f"<head>\n    {script}", 1)
    return html.replace('href="/static/', f'href="{base_path}/static/').replace(
        'src="/static/', f'src="{base_path}/static/'
    )


@router.get("/", response_class=HTMLResponse)
def index(authenticated: MaybeAuthenticated, settings: AppSettings):
    """Task list page; redirects to the login page without a session."""
    if not authenticated:
        return RedirectResponse(
            f"{settings.base_path}/login", status_code=status.HTTP_303_SEE_OTHER
        )
    return HTMLResponse(inject_base_path(_load_page("index.html"), settings.base_path))


@router.get("/login", response_class=HTMLResponse)
def login_page(authenticated: MaybeAuthenticated, settings: AppSettings):
    """Login page; redirects to the task list when already logged in."""
    if authenticated:
        return RedirectResponse(f"{settings.base_path}/", status_code=status.HTTP_303_SEE_OTHER)
    return HTMLResponse(inject_base_path(_load_page("login.html"), settings.base_path))


@router.get("/static/{path:path}")
def static_file(path: str):
    """Serve one of the bundled assets by exact name."""
    media_type = STATIC_ASSETS.get(path)
    if media_type is None:
        raise NotFound()
    return FileResponse(STATIC_DIR / path, media_type=media_type)
