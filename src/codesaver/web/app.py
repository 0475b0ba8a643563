"""FastAPI application backing the codesaver web UI."""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel

from codesaver.archive.builder import ArchiveBuilder, is_safe_archive_path
from codesaver.archive.compressor import ZipCompressor
from codesaver.config import AppConfig
from codesaver.detection.detector import Detector
from codesaver.detection.mime import get_file_icon
from codesaver.detection.paths import FILE_EXTENSION_RE
from codesaver.errors import CompressionFailure, CompressionUnavailable
from codesaver.models import FileRecord
from codesaver.web.frontend import router as frontend_router

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="codesaver Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(frontend_router)


class DetectPayload(BaseModel):
    html: str


class FilePayload(BaseModel):
    path: str
    content: str


class ArchivePayload(BaseModel):
    files: List[FilePayload]


class DetectedFile(BaseModel):
    path: str
    content: str
    mime_type: str
    icon: str
    size: int
    lines: int


def _to_detected(record: FileRecord) -> DetectedFile:
    return DetectedFile(
        path=record.path,
        content=record.content,
        mime_type=record.mime_type,
        icon=get_file_icon(record.path),
        size=record.size,
        lines=record.line_count,
    )


def _build_archiver(config: AppConfig) -> ArchiveBuilder:
    return ArchiveBuilder(
        ZipCompressor(),
        manifest_name=config.manifest_name,
        compression_level=config.compression_level,
        archive_prefix=config.archive_prefix,
    )


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/detect")
async def detect_files(payload: DetectPayload) -> dict[str, Any]:
    if not payload.html.strip():
        raise HTTPException(status_code=400, detail="Empty document")

    detector = Detector(search_budget=AppConfig().search_budget)
    records = detector.detect_markup(payload.html)
    return {
        "files": [_to_detected(record) for record in records],
        "stats": {"count": len(records), "total_size": sum(r.size for r in records)},
    }


@app.post("/archive")
async def build_archive(payload: ArchivePayload) -> Response:
    if not payload.files:
        raise HTTPException(status_code=400, detail="No files selected")

    records = []
    for item in payload.files:
        path = item.path.strip()
        if not FILE_EXTENSION_RE.search(path) or not is_safe_archive_path(path):
            raise HTTPException(status_code=400, detail=f"Invalid file path: {item.path}")
        if not item.content.strip():
            raise HTTPException(status_code=400, detail=f"Empty file: {item.path}")
        records.append(FileRecord(path=path, content=item.content))

    try:
        artifact = await _build_archiver(AppConfig()).build(records)
    except CompressionUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except CompressionFailure as exc:
        raise HTTPException(status_code=500, detail=f"Save failed: {exc}") from exc

    return Response(
        content=artifact.data,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )
