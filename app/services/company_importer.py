"""Bulk Import Service - Validate and import directory data from CSV/XLSX files.

Supports:
- Company import
- Category import

CSV files are semicolon-delimited; XLSX files are read from the first
worksheet. Both start with a header row. Columns are matched by position,
so header captions may be translated, and trailing extra columns are
ignored.

Each row is written inside its own SAVEPOINT: a row that fails validation
or hits a database constraint is rolled back alone and reported, and the
import moves on to the next row.
"""

import csv
import io
from typing import List, Dict, Any, Optional, Tuple
from enum import Enum
import logging

import openpyxl
from pydantic import Field, ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DirectoryException
from app.models.category import Category
from app.schemas.category import CategoryCreate
from app.schemas.company import CompanyCreate
from app.schemas.types import ApiModel
from app.services.company_store import CompanyStore

logger = logging.getLogger(__name__)

CSV_DELIMITER = ";"
MAX_REPORTED_ERRORS = 50


class ImportType(str, Enum):
    COMPANIES = "companies"
    CATEGORIES = "categories"


class FileFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"


class ImportResult(ApiModel):
    success: bool
    total_rows: int
    imported_count: int
    skipped_count: int
    error_count: int
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


# ========================
# Column Layouts
# ========================

TEMPLATES = {
    ImportType.COMPANIES: [
        "nombreEmpresa",
        "email1",
        "email2",
        "telefono1",
        "telefono2",
        "sitioWeb",
        "direccionFisica",
        "descripcionEmpresa",
        "categoriesIds",
        "membershipTypeId",
        "estado",
    ],
    ImportType.CATEGORIES: ["nombreCategoria", "descripcion", "icono", "iconoUrl"],
}

EXAMPLES = {
    ImportType.COMPANIES: [
        "Parques Alegres SA",
        "ventas@parquesalegres.mx",
        "",
        "+52 55 1234 5678",
        "",
        "https://parquesalegres.mx",
        "Av. Reforma 100, CDMX",
        "Fabricante de juegos infantiles",
        "1,3",
        "1",
        "activo",
    ],
    ImportType.CATEGORIES: ["Juegos Infantiles", "Columpios, resbaladillas y más", "Gamepad2", ""],
}


def generate_csv_template(import_type: ImportType, include_examples: bool = False) -> str:
    """CSV template with the header row, optionally followed by an example row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=CSV_DELIMITER, lineterminator="\n")
    writer.writerow(TEMPLATES[import_type])
    if include_examples:
        writer.writerow(EXAMPLES[import_type])
    return buffer.getvalue()


# ========================
# Parsing
# ========================


def decode_content(content: bytes) -> str:
    """Decode an uploaded CSV, falling back to latin-1 for spreadsheet exports."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    # Spreadsheets hand numeric ids back as floats
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _is_blank(row: List[str]) -> bool:
    return not any(cell for cell in row)


def parse_csv_content(content: str) -> List[List[str]]:
    """Data rows of a semicolon-delimited CSV, header row dropped."""
    reader = csv.reader(io.StringIO(content), delimiter=CSV_DELIMITER)
    rows = [[_cell_text(cell) for cell in row] for row in reader]
    return [row for row in rows[1:] if not _is_blank(row)]


def parse_xlsx_content(content: bytes) -> List[List[str]]:
    """Data rows of the first worksheet, header row dropped."""
    wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = [[_cell_text(cell) for cell in row] for row in ws.iter_rows(min_row=2, values_only=True)]
    finally:
        wb.close()
    return [row for row in rows if not _is_blank(row)]


def parse_file(content: bytes, file_format: FileFormat) -> List[List[str]]:
    if file_format == FileFormat.XLSX:
        return parse_xlsx_content(content)
    return parse_csv_content(decode_content(content))


# ========================
# Validation Functions
# ========================


def _split_ids(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def row_to_payload(values: List[str], import_type: ImportType) -> Dict[str, Any]:
    """Map positional cells to schema fields; blank cells are left out."""
    columns = TEMPLATES[import_type]
    padded = list(values[: len(columns)]) + [""] * max(0, len(columns) - len(values))
    payload: Dict[str, Any] = {}
    for column, value in zip(columns, padded):
        if column == "categoriesIds":
            payload[column] = _split_ids(value)
        elif value:
            payload[column] = value
    return payload


def validate_row(
    values: List[str], import_type: ImportType, row_num: int
) -> Tuple[bool, Optional[Dict], Optional[str]]:
    """Validate a single row and return (is_valid, validated_data, error_message)."""
    payload = row_to_payload(values, import_type)
    try:
        if import_type == ImportType.COMPANIES:
            validated = CompanyCreate.model_validate(payload)
        else:
            validated = CategoryCreate.model_validate(payload)
        return True, validated.model_dump(), None
    except PydanticValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'row'}: {err['msg']}" for err in e.errors()
        )
        return False, None, f"Row {row_num}: {errors}"


# ========================
# Import
# ========================


async def _insert_row(db: AsyncSession, import_type: ImportType, data: Dict[str, Any]) -> None:
    if import_type == ImportType.COMPANIES:
        await CompanyStore(db).insert(data)
    else:
        db.add(Category(**data))
        await db.flush()


async def process_import(
    rows: List[List[str]],
    import_type: ImportType,
    db: AsyncSession,
    max_rows: Optional[int] = None,
) -> ImportResult:
    """Import parsed rows. Failing rows are counted and skipped, never fatal."""
    warnings = []
    total_rows = len(rows)
    over_limit = 0
    if max_rows is not None and total_rows > max_rows:
        over_limit = total_rows - max_rows
        warnings.append(f"Only the first {max_rows} of {total_rows} rows were processed")
        rows = rows[:max_rows]

    errors = []
    imported = 0

    for i, values in enumerate(rows, start=2):  # Start at 2 (1 for header, 1 for 1-indexed)
        is_valid, data, error = validate_row(values, import_type, i)
        if not is_valid:
            errors.append({"row": i, "error": error})
            continue

        try:
            async with db.begin_nested():
                await _insert_row(db, import_type, data)
            imported += 1
        except DirectoryException as e:
            errors.append({"row": i, "error": f"Row {i}: {e.detail}", "details": e.errors})
        except IntegrityError as e:
            logger.warning(f"Import row {i} rejected by database: {e.orig}")
            errors.append({"row": i, "error": f"Row {i}: conflicts with an existing record"})

    await db.commit()

    logger.info(
        f"{import_type.value} import finished: {imported} imported, {len(errors)} failed, "
        f"{over_limit} over the limit of {total_rows}"
    )
    return ImportResult(
        success=not errors and not over_limit,
        total_rows=total_rows,
        imported_count=imported,
        # Failed rows plus rows past the limit; imported + skipped == total_rows
        skipped_count=len(errors) + over_limit,
        error_count=len(errors),
        errors=errors[:MAX_REPORTED_ERRORS],
        warnings=warnings,
    )
