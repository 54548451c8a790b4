"""
Bulk export of companies and categories as CSV or XLSX.

Exports use the import column layout, so an exported file can be edited
and imported again. Company exports add a trailing ``categorias`` column
with category names; the importer ignores it.
"""

import csv
import io
from typing import Any, List, Tuple

import openpyxl
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company
from app.services.company_importer import CSV_DELIMITER, FileFormat, ImportType, TEMPLATES
from app.services.company_store import CategoryStore, CompanyStore
from app.services.relation_resolver import RelationResolver

EXPORT_BATCH_SIZE = 500

MEDIA_TYPES = {
    FileFormat.CSV: "text/csv",
    FileFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    return getattr(value, "value", value)


async def _company_rows(db: AsyncSession) -> List[List[Any]]:
    store = CompanyStore(db)
    resolver = RelationResolver(db)
    companies = await store.list(order_by=(Company.id,))

    rows = []
    # Hydrate in batches to keep relation lookups bounded
    for start in range(0, len(companies), EXPORT_BATCH_SIZE):
        for company in await resolver.resolve_many(companies[start:start + EXPORT_BATCH_SIZE]):
            rows.append([
                company.nombre_empresa,
                company.email1,
                _cell(company.email2),
                _cell(company.telefono1),
                _cell(company.telefono2),
                _cell(company.sitio_web),
                _cell(company.direccion_fisica),
                _cell(company.descripcion_empresa),
                ",".join(str(i) for i in company.categories_ids),
                _cell(company.membership_type_id),
                _cell(company.estado),
                ", ".join(c.nombre_categoria for c in company.categories),
            ])
    return rows


async def _category_rows(db: AsyncSession) -> List[List[Any]]:
    categories = await CategoryStore(db).list()
    return [
        [c.nombre_categoria, _cell(c.descripcion), _cell(c.icono), _cell(c.icono_url)]
        for c in categories
    ]


async def export_rows(db: AsyncSession, export_type: ImportType) -> Tuple[List[str], List[List[Any]]]:
    """Header and data rows for ``export_type``."""
    if export_type == ImportType.COMPANIES:
        return TEMPLATES[export_type] + ["categorias"], await _company_rows(db)
    return list(TEMPLATES[export_type]), await _category_rows(db)


def to_csv(headers: List[str], rows: List[List[Any]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=CSV_DELIMITER, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    # BOM so spreadsheet apps detect UTF-8
    return buffer.getvalue().encode("utf-8-sig")


def to_xlsx(headers: List[str], rows: List[List[Any]], sheet_title: str) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title[:31]
    ws.append(headers)
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


async def export_file(db: AsyncSession, export_type: ImportType, file_format: FileFormat) -> bytes:
    headers, rows = await export_rows(db, export_type)
    if file_format == FileFormat.XLSX:
        return to_xlsx(headers, rows, export_type.value)
    return to_csv(headers, rows)
