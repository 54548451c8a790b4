"""
Tests for bulk import/export (/api/import, /api/export).
"""
import csv
import io

import openpyxl
import pytest
from httpx import AsyncClient

from tests.factories import CategoryFactory, CompanyFactory

COMPANY_HEADER = (
    "nombreEmpresa;email1;email2;telefono1;telefono2;sitioWeb;direccionFisica;"
    "descripcionEmpresa;categoriesIds;membershipTypeId;estado"
)


def _xlsx_bytes(rows: list) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class TestTemplates:
    """GET /api/import/templates/{type}"""

    @pytest.mark.asyncio
    async def test_company_template(self, client: AsyncClient):
        """The template is a semicolon-delimited header row."""
        response = await client.get("/api/import/templates/companies")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.strip() == COMPANY_HEADER

    @pytest.mark.asyncio
    async def test_unknown_template(self, client: AsyncClient):
        """Only companies and categories have templates."""
        response = await client.get("/api/import/templates/invoices")

        assert response.status_code == 400


class TestImport:
    """POST /api/import/{type}"""

    @pytest.mark.asyncio
    async def test_import_companies_csv_partial_failure(self, client: AsyncClient):
        """Bad rows are counted and skipped, good rows are imported."""
        category = (await client.post("/api/categories", json=CategoryFactory())).json()
        cid = category["id"]
        content = "\n".join([
            COMPANY_HEADER,
            f"Parques del Sur;ventas@parques.mx;;5551234;;https://parques.mx;Calle 1;Juegos;{cid};;activo",
            f"Sin Correo;no-es-correo;;;;;;;{cid};;activo",
            "Sin Categoria;info@sincat.mx;;;;;;;;;activo",
            f"Categoria Fantasma;info@fantasma.mx;;;;;;;{cid},9999;;activo",
            f"Luces SA;info@luces.mx;;;;;;LED;{cid};;pendiente",
        ])

        response = await client.post(
            "/api/import/companies",
            files={"file": ("empresas.csv", content.encode("utf-8"), "text/csv")},
        )

        assert response.status_code == 200
        result = response.json()
        assert result["totalRows"] == 5
        assert result["importedCount"] == 2
        assert result["errorCount"] == 3
        assert sorted(e["row"] for e in result["errors"]) == [3, 4, 5]

        listed = (await client.get("/api/companies")).json()
        assert {c["nombreEmpresa"] for c in listed["companies"]} == {"Parques del Sur", "Luces SA"}
        assert all(c["categoriesIds"] == [cid] for c in listed["companies"])

    @pytest.mark.asyncio
    async def test_import_categories_xlsx(self, client: AsyncClient):
        """XLSX uploads are read from the first worksheet."""
        content = _xlsx_bytes([
            ["nombreCategoria", "descripcion", "icono", "iconoUrl"],
            ["Juegos Infantiles", "Columpios", "Gamepad2", None],
            ["Paisajismo y Riego", None, None, None],
        ])

        response = await client.post(
            "/api/import/categories",
            params={"format": "xlsx"},
            files={"file": ("categorias.xlsx", content, "application/octet-stream")},
        )

        assert response.status_code == 200
        assert response.json()["importedCount"] == 2
        names = [c["nombreCategoria"] for c in (await client.get("/api/categories")).json()["categories"]]
        assert names == ["Juegos Infantiles", "Paisajismo y Riego"]

    @pytest.mark.asyncio
    async def test_duplicate_category_row_is_reported(self, client: AsyncClient):
        """A unique-name clash fails that row only."""
        await client.post("/api/categories", json=CategoryFactory(nombreCategoria="Juegos Infantiles"))
        content = "nombreCategoria;descripcion;icono;iconoUrl\nJuegos Infantiles;;;\nMobiliario Urbano;;;\n"

        response = await client.post(
            "/api/import/categories",
            files={"file": ("categorias.csv", content.encode("utf-8"), "text/csv")},
        )

        result = response.json()
        assert result["importedCount"] == 1
        assert result["errorCount"] == 1
        assert result["errors"][0]["row"] == 2

    @pytest.mark.asyncio
    async def test_unreadable_xlsx(self, client: AsyncClient):
        """A file that is not a workbook is rejected as a whole."""
        response = await client.post(
            "/api/import/categories",
            params={"format": "xlsx"},
            files={"file": ("roto.xlsx", b"not a zip file", "application/octet-stream")},
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "file"


class TestExport:
    """GET /api/export/{type}"""

    @pytest.mark.asyncio
    async def test_export_companies_csv(self, client: AsyncClient):
        """CSV export uses the import columns plus category names."""
        category = (await client.post("/api/categories", json=CategoryFactory(nombreCategoria="Parques"))).json()
        await client.post(
            "/api/companies",
            json=CompanyFactory(nombreEmpresa="Parques del Sur", categoriesIds=[category["id"]]),
        )

        response = await client.get("/api/export/companies")

        assert response.status_code == 200
        assert "attachment" in response.headers["content-disposition"]
        rows = list(csv.reader(io.StringIO(response.content.decode("utf-8-sig")), delimiter=";"))
        assert ";".join(rows[0]) == COMPANY_HEADER + ";categorias"
        cells = rows[1]
        assert cells[0] == "Parques del Sur"
        assert cells[8] == str(category["id"])
        assert cells[-1] == "Parques"

    @pytest.mark.asyncio
    async def test_export_then_import_round_trip(self, client: AsyncClient):
        """An exported category file can be imported into an empty directory."""
        await client.post("/api/categories", json=CategoryFactory(nombreCategoria="Iluminación", icono="Zap"))
        exported = await client.get("/api/export/categories", params={"format": "xlsx"})
        assert exported.status_code == 200

        wb = openpyxl.load_workbook(io.BytesIO(exported.content))
        rows = list(wb.active.iter_rows(values_only=True))
        assert rows[0] == ("nombreCategoria", "descripcion", "icono", "iconoUrl")
        assert rows[1][0] == "Iluminación"
        assert rows[1][2] == "Zap"
