"""Static HTML frontend for the codesaver web UI."""

from __future__ import annotations

import html
import json
from importlib.resources import files

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from codesaver.config import AppConfig

router = APIRouter()


def _load_template() -> str:
    template = files("codesaver.web").joinpath("templates", "index.html")
    return template.read_text(encoding="utf-8")


def render_index(config: AppConfig | None = None) -> str:
    """Fill the archive naming settings into the page template."""
    config = config or AppConfig()
    page = _load_template()
    page = page.replace("__MANIFEST_NAME__", html.escape(config.manifest_name))
    # Embedded in a script block; "</" must not close it early.
    prefix = json.dumps(config.archive_prefix).replace("</", "<\\/")
    return page.replace("__ARCHIVE_PREFIX__", prefix)


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return HTMLResponse(content=render_index())
