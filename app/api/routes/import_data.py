"""Data Import/Export API - bulk CSV/XLSX transfer and template downloads.

Features:
- CSV template downloads for each import type
- Bulk import with per-row error reporting
- CSV/XLSX export in the import column layout
"""
from fastapi import APIRouter, Query, UploadFile, File
from fastapi.responses import Response, StreamingResponse
from datetime import datetime
from typing import Optional
from zipfile import BadZipFile
import csv
import logging
import io

from openpyxl.utils.exceptions import InvalidFileException

from app.api.deps import DbSession
from app.config import settings
from app.exceptions import ValidationError
from app.services.company_importer import (
    FileFormat,
    ImportType,
    ImportResult,
    generate_csv_template,
    parse_file,
    process_import,
)
from app.services.data_export import MEDIA_TYPES, export_file

logger = logging.getLogger(__name__)

import_router = APIRouter()
export_router = APIRouter()

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


# ========================
# Template Endpoints
# ========================

@import_router.get("/templates/{import_type}")
async def download_template(
    import_type: ImportType,
    include_examples: bool = Query(False, alias="includeExamples", description="Include example data row"),
):
    """Download a CSV template for the specified import type."""
    content = generate_csv_template(import_type, include_examples=include_examples)

    return StreamingResponse(
        io.BytesIO(content.encode()),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={import_type.value}_template.csv"
        }
    )


# ========================
# Import Endpoints
# ========================

@import_router.post("/{import_type}", response_model=ImportResult)
async def import_file(
    import_type: ImportType,
    db: DbSession,
    file: UploadFile = File(...),
    file_format: Optional[FileFormat] = Query(None, alias="format"),
):
    """Import rows from a CSV or XLSX file.

    The format is taken from ``format`` or, when absent, from the file name.
    Rows that fail are reported in ``errors`` and do not stop the import.
    """
    if file_format is None:
        file_format = FileFormat.XLSX if (file.filename or "").lower().endswith(".xlsx") else FileFormat.CSV

    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValidationError.for_field("file", "File exceeds the 10 MB upload limit")

    try:
        rows = parse_file(content, file_format)
    except (BadZipFile, InvalidFileException, KeyError, ValueError, csv.Error) as e:
        logger.warning(f"Unreadable {file_format.value} upload {file.filename!r}: {e}")
        raise ValidationError.for_field("file", f"Could not read the file as {file_format.value.upper()}")

    logger.info(f"Importing {len(rows)} {import_type.value} rows from {file.filename!r}")
    return await process_import(rows, import_type, db, max_rows=settings.IMPORT_MAX_ROWS)


# ========================
# Export Endpoints
# ========================

@export_router.get("/{export_type}")
async def export_data(
    export_type: ImportType,
    db: DbSession,
    file_format: FileFormat = Query(FileFormat.CSV, alias="format"),
):
    """Download every company or category as CSV or XLSX."""
    content = await export_file(db, export_type, file_format)
    filename = f"{export_type.value}_{datetime.now().strftime('%Y%m%d')}.{file_format.value}"
    return Response(
        content=content,
        media_type=MEDIA_TYPES[file_format],
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
