"""
Tests for the companies API endpoints (/api/companies).

Companies are created through the API so the junction rows behind
``categoriesIds`` / ``certificateIds`` are written the same way
production writes them.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import CompanyCategory
from app.models.opinion import Opinion
from tests.factories import CategoryFactory, CertificateFactory, CompanyFactory, UserFactory

COMPANIES_PREFIX = "/api/companies"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _create_category(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/categories", json=CategoryFactory(**overrides))
    assert response.status_code == 201, f"Category creation failed: {response.text}"
    return response.json()


async def _create_company(client: AsyncClient, category_ids: list, **overrides) -> dict:
    """Create a company through the API and return the response dict."""
    payload = CompanyFactory(categoriesIds=category_ids, **overrides)
    response = await client.post(COMPANIES_PREFIX, json=payload)
    assert response.status_code == 201, f"Company creation failed: {response.text}"
    return response.json()


def _error_fields(response) -> list:
    return [detail["field"] for detail in response.json().get("details", [])]


# ===========================================================================
# POST /api/companies
# ===========================================================================


class TestCreateCompany:
    """Tests for POST /api/companies."""

    @pytest.mark.asyncio
    async def test_create_company_success(self, client: AsyncClient):
        """Creating a company with valid data returns 201 with hydrated relations."""
        category = await _create_category(client)

        response = await client.post(
            COMPANIES_PREFIX,
            json=CompanyFactory(nombreEmpresa="Parques Alegres", categoriesIds=[category["id"]]),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] is not None
        assert data["nombreEmpresa"] == "Parques Alegres"
        assert data["categoriesIds"] == [category["id"]]
        assert [c["nombreCategoria"] for c in data["categories"]] == [category["nombreCategoria"]]
        assert data["certificates"] == []
        assert data["membershipType"] is None
        assert data["user"] is None
        assert data["estado"] == "activo"

    @pytest.mark.asyncio
    async def test_create_company_keeps_category_order(self, client: AsyncClient):
        """Relation ids come back in the order the client sent them, without repeats."""
        first = await _create_category(client)
        second = await _create_category(client)

        data = await _create_company(client, [second["id"], first["id"], second["id"]])

        assert data["categoriesIds"] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_create_company_with_certificates_and_owner(self, client: AsyncClient):
        """Certificates and the owning user are hydrated on the response."""
        category = await _create_category(client)
        certificate = (await client.post("/api/certificates", json=CertificateFactory())).json()
        user = (await client.post("/api/users", json=UserFactory())).json()

        data = await _create_company(
            client, [category["id"]], certificateIds=[certificate["id"]], userId=user["id"]
        )

        assert data["certificateIds"] == [certificate["id"]]
        assert data["certificates"][0]["nombreCertificado"] == certificate["nombreCertificado"]
        assert data["user"]["email"] == user["email"]

    @pytest.mark.asyncio
    async def test_create_company_missing_categories(self, client: AsyncClient):
        """Omitting categoriesIds returns 400 naming the field."""
        payload = CompanyFactory()
        del payload["categoriesIds"]

        response = await client.post(COMPANIES_PREFIX, json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"
        assert "body.categoriesIds" in _error_fields(response)

    @pytest.mark.asyncio
    async def test_create_company_empty_categories(self, client: AsyncClient):
        """An empty categoriesIds list is rejected."""
        response = await client.post(COMPANIES_PREFIX, json=CompanyFactory(categoriesIds=[]))

        assert response.status_code == 400
        assert "body.categoriesIds" in _error_fields(response)

    @pytest.mark.asyncio
    async def test_create_company_unknown_category(self, client: AsyncClient):
        """Referencing a category that does not exist returns 400."""
        response = await client.post(COMPANIES_PREFIX, json=CompanyFactory(categoriesIds=[9999]))

        assert response.status_code == 400
        assert _error_fields(response) == ["categoriesIds"]
        assert "9999" in response.json()["details"][0]["message"]

    @pytest.mark.asyncio
    async def test_create_company_invalid_email(self, client: AsyncClient):
        """A malformed email1 returns 400."""
        category = await _create_category(client)

        response = await client.post(
            COMPANIES_PREFIX,
            json=CompanyFactory(categoriesIds=[category["id"]], email1="not-an-email"),
        )

        assert response.status_code == 400
        assert "body.email1" in _error_fields(response)

    @pytest.mark.asyncio
    async def test_create_company_blank_optional_url_is_ignored(self, client: AsyncClient):
        """Empty strings from untouched form inputs are stored as null."""
        category = await _create_category(client)

        data = await _create_company(client, [category["id"]], sitioWeb="", email2="")

        assert data["sitioWeb"] is None
        assert data["email2"] is None

    @pytest.mark.asyncio
    async def test_create_company_derives_monthly_end_date(self, client: AsyncClient):
        """A monthly membership starting Jan 31 ends on the last day of February."""
        category = await _create_category(client)

        data = await _create_company(
            client,
            [category["id"]],
            membershipPeriodicidad="mensual",
            fechaInicioMembresia="2024-01-31",
        )

        assert data["fechaFinMembresia"] == "2024-02-29"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "periodicidad,expected",
        [("mensual", "2024-02-15"), ("anual", "2025-01-15")],
    )
    async def test_create_company_derives_end_date(self, client: AsyncClient, periodicidad: str, expected: str):
        """The end date follows from the start date and the billing cadence."""
        category = await _create_category(client)

        data = await _create_company(
            client,
            [category["id"]],
            membershipPeriodicidad=periodicidad,
            fechaInicioMembresia="2024-01-15",
        )

        assert data["fechaFinMembresia"] == expected

    @pytest.mark.asyncio
    async def test_create_company_without_cadence_has_no_end_date(self, client: AsyncClient):
        """A start date alone does not produce an end date."""
        category = await _create_category(client)

        data = await _create_company(client, [category["id"]], fechaInicioMembresia="2024-01-15")

        assert data["fechaFinMembresia"] is None

    @pytest.mark.asyncio
    async def test_create_company_explicit_end_date_wins(self, client: AsyncClient):
        """An end date sent by the administrator is kept as an override."""
        category = await _create_category(client)

        data = await _create_company(
            client,
            [category["id"]],
            membershipPeriodicidad="anual",
            fechaInicioMembresia="2024-03-01",
            fechaFinMembresia="2024-12-31",
        )

        assert data["fechaFinMembresia"] == "2024-12-31"


# ===========================================================================
# GET /api/companies
# ===========================================================================


class TestListCompanies:
    """Tests for GET /api/companies."""

    @pytest.mark.asyncio
    async def test_list_companies_empty(self, client: AsyncClient):
        """Listing with no companies returns an empty page."""
        response = await client.get(COMPANIES_PREFIX)

        assert response.status_code == 200
        assert response.json() == {"companies": [], "total": 0, "page": 1, "totalPages": 0}

    @pytest.mark.asyncio
    async def test_total_counts_filtered_rows(self, client: AsyncClient):
        """total and totalPages follow the category filter, not the whole table."""
        parks = await _create_category(client)
        lighting = await _create_category(client)
        await _create_company(client, [parks["id"]])
        await _create_company(client, [parks["id"], lighting["id"]])
        await _create_company(client, [lighting["id"]])

        response = await client.get(COMPANIES_PREFIX, params={"categoryId": parks["id"], "limit": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["totalPages"] == 2
        assert len(data["companies"]) == 1
        assert parks["id"] in data["companies"][0]["categoriesIds"]

    @pytest.mark.asyncio
    async def test_pages_do_not_overlap(self, client: AsyncClient):
        """Walking the pages visits every company exactly once, newest first."""
        category = await _create_category(client)
        created = [await _create_company(client, [category["id"]]) for _ in range(5)]

        seen = []
        for page in (1, 2, 3):
            response = await client.get(COMPANIES_PREFIX, params={"page": page, "limit": 2})
            seen.extend(c["id"] for c in response.json()["companies"])

        assert seen == [c["id"] for c in reversed(created)]

    @pytest.mark.asyncio
    async def test_page_past_the_end(self, client: AsyncClient):
        """A page past the last one is empty but still reports the total."""
        category = await _create_category(client)
        await _create_company(client, [category["id"]])

        response = await client.get(COMPANIES_PREFIX, params={"page": 5})

        data = response.json()
        assert data["companies"] == []
        assert data["total"] == 1
        assert data["page"] == 5

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, client: AsyncClient):
        """search matches name or description regardless of case."""
        category = await _create_category(client)
        await _create_company(client, [category["id"]], nombreEmpresa="Columpios del Norte")
        await _create_company(
            client, [category["id"]], nombreEmpresa="Acme", descripcionEmpresa="Venta de COLUMPIOS"
        )
        await _create_company(client, [category["id"]], nombreEmpresa="Luminarias SA", descripcionEmpresa="LED")

        response = await client.get(COMPANIES_PREFIX, params={"search": "columpios"})

        names = {c["nombreEmpresa"] for c in response.json()["companies"]}
        assert names == {"Columpios del Norte", "Acme"}

    @pytest.mark.asyncio
    async def test_blank_search_matches_everything(self, client: AsyncClient):
        """A whitespace-only search is no filter at all."""
        category = await _create_category(client)
        await _create_company(client, [category["id"]])
        await _create_company(client, [category["id"]])

        response = await client.get(COMPANIES_PREFIX, params={"search": "   "})

        assert response.json()["total"] == 2

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, client: AsyncClient):
        """A percent sign in the search text is not a wildcard."""
        category = await _create_category(client)
        await _create_company(client, [category["id"]], nombreEmpresa="Descuento 100% garantizado")
        await _create_company(client, [category["id"]], nombreEmpresa="Otra empresa")

        response = await client.get(COMPANIES_PREFIX, params={"search": "%"})

        assert response.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_admin_scope_includes_every_status(self, client: AsyncClient):
        """Without estado the admin listing shows inactive and pending companies too."""
        category = await _create_category(client)
        await _create_company(client, [category["id"]], estado="activo")
        await _create_company(client, [category["id"]], estado="inactivo")
        await _create_company(client, [category["id"]], estado="pendiente")

        response = await client.get(COMPANIES_PREFIX)

        assert response.json()["total"] == 3

    @pytest.mark.asyncio
    async def test_public_scope_defaults_to_active(self, client: AsyncClient):
        """scope=public only lists active companies unless estado says otherwise."""
        category = await _create_category(client)
        await _create_company(client, [category["id"]], estado="activo")
        await _create_company(client, [category["id"]], estado="inactivo")

        public = await client.get(COMPANIES_PREFIX, params={"scope": "public"})
        explicit = await client.get(COMPANIES_PREFIX, params={"scope": "public", "estado": "inactivo"})

        assert [c["estado"] for c in public.json()["companies"]] == ["activo"]
        assert [c["estado"] for c in explicit.json()["companies"]] == ["inactivo"]

    @pytest.mark.asyncio
    async def test_filters_combine_with_and(self, client: AsyncClient):
        """Category, plan and status filters must all match."""
        category = await _create_category(client)
        plan = (await client.post("/api/membership-types", json={
            "nombrePlan": "Premium", "opcionesPrecios": [{"periodicidad": "mensual", "costo": 300}],
        })).json()
        await _create_company(client, [category["id"]], membershipTypeId=plan["id"], estado="activo")
        await _create_company(client, [category["id"]], membershipTypeId=plan["id"], estado="inactivo")
        await _create_company(client, [category["id"]], estado="activo")

        response = await client.get(COMPANIES_PREFIX, params={
            "categoryId": category["id"], "membershipTypeId": plan["id"], "estado": "activo",
        })

        data = response.json()
        assert data["total"] == 1
        assert data["companies"][0]["membershipType"]["nombrePlan"] == "Premium"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params, field",
        [
            ({"page": "abc"}, "query.page"),
            ({"page": 0}, "query.page"),
            ({"limit": 101}, "query.limit"),
            ({"categoryId": "parques"}, "query.categoryId"),
            ({"membershipTypeId": "1.5"}, "query.membershipTypeId"),
            ({"estado": "borrado"}, "query.estado"),
        ],
    )
    async def test_invalid_query_parameter(self, client: AsyncClient, params: dict, field: str):
        """Malformed query parameters are rejected with 400 instead of being coerced."""
        response = await client.get(COMPANIES_PREFIX, params=params)

        assert response.status_code == 400
        assert field in _error_fields(response)


# ===========================================================================
# GET /api/companies/{id} and /api/companies/user/{userId}
# ===========================================================================


class TestGetCompany:
    """Tests for single company lookups."""

    @pytest.mark.asyncio
    async def test_get_company(self, client: AsyncClient):
        """Fetching a company by id returns it with relations."""
        category = await _create_category(client)
        created = await _create_company(client, [category["id"]])

        response = await client.get(f"{COMPANIES_PREFIX}/{created['id']}")

        assert response.status_code == 200
        assert response.json()["categories"][0]["id"] == category["id"]

    @pytest.mark.asyncio
    async def test_get_company_not_found(self, client: AsyncClient):
        """An unknown id returns 404 with the standard error body."""
        response = await client.get(f"{COMPANIES_PREFIX}/4242")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Company with ID 4242 was not found"
        assert body["code"] == "RES_001"
        assert body["traceId"]

    @pytest.mark.asyncio
    async def test_get_company_non_numeric_id(self, client: AsyncClient):
        """A non-numeric id is a client error, not a 404."""
        response = await client.get(f"{COMPANIES_PREFIX}/abc")

        assert response.status_code == 400
        assert "path.company_id" in _error_fields(response)

    @pytest.mark.asyncio
    async def test_list_user_companies(self, client: AsyncClient):
        """Only the companies owned by the user are returned."""
        category = await _create_category(client)
        owner = (await client.post("/api/users", json=UserFactory())).json()
        mine = await _create_company(client, [category["id"]], userId=owner["id"])
        await _create_company(client, [category["id"]])

        response = await client.get(f"{COMPANIES_PREFIX}/user/{owner['id']}")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [mine["id"]]


# ===========================================================================
# PUT /api/companies/{id}
# ===========================================================================


class TestUpdateCompany:
    """Tests for PUT /api/companies/{id}."""

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, client: AsyncClient):
        """Only the fields sent are changed."""
        category = await _create_category(client)
        created = await _create_company(client, [category["id"]], telefono1="555-0100")

        response = await client.put(
            f"{COMPANIES_PREFIX}/{created['id']}", json={"nombreEmpresa": "Nuevo Nombre"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["nombreEmpresa"] == "Nuevo Nombre"
        assert data["telefono1"] == "555-0100"
        assert data["categoriesIds"] == [category["id"]]

    @pytest.mark.asyncio
    async def test_update_replaces_categories(self, client: AsyncClient):
        """Sending categoriesIds rewrites the whole list."""
        old = await _create_category(client)
        new = await _create_category(client)
        created = await _create_company(client, [old["id"]])

        response = await client.put(
            f"{COMPANIES_PREFIX}/{created['id']}", json={"categoriesIds": [new["id"]]}
        )

        assert response.json()["categoriesIds"] == [new["id"]]

    @pytest.mark.asyncio
    async def test_update_rejects_empty_categories(self, client: AsyncClient):
        """A company cannot be left without categories."""
        category = await _create_category(client)
        created = await _create_company(client, [category["id"]])

        response = await client.put(f"{COMPANIES_PREFIX}/{created['id']}", json={"categoriesIds": []})

        assert response.status_code == 400
        after = await client.get(f"{COMPANIES_PREFIX}/{created['id']}")
        assert after.json()["categoriesIds"] == [category["id"]]

    @pytest.mark.asyncio
    async def test_update_rejects_clearing_required_field(self, client: AsyncClient):
        """An explicit null for a required field is a validation error."""
        category = await _create_category(client)
        created = await _create_company(client, [category["id"]])

        response = await client.put(f"{COMPANIES_PREFIX}/{created['id']}", json={"nombreEmpresa": None})

        assert response.status_code == 400
        assert "body.nombreEmpresa" in _error_fields(response)

    @pytest.mark.asyncio
    async def test_update_start_date_rederives_end_date(self, client: AsyncClient):
        """Moving the start date moves the derived end date with it."""
        category = await _create_category(client)
        created = await _create_company(
            client,
            [category["id"]],
            membershipPeriodicidad="anual",
            fechaInicioMembresia="2024-02-29",
        )
        assert created["fechaFinMembresia"] == "2025-02-28"

        response = await client.put(
            f"{COMPANIES_PREFIX}/{created['id']}", json={"fechaInicioMembresia": "2024-05-10"}
        )

        assert response.json()["fechaFinMembresia"] == "2025-05-10"

    @pytest.mark.asyncio
    async def test_update_unrelated_field_keeps_override(self, client: AsyncClient):
        """Editing other fields does not recompute an overridden end date."""
        category = await _create_category(client)
        created = await _create_company(
            client,
            [category["id"]],
            membershipPeriodicidad="mensual",
            fechaInicioMembresia="2024-01-10",
            fechaFinMembresia="2024-06-30",
        )

        response = await client.put(
            f"{COMPANIES_PREFIX}/{created['id']}", json={"notasMembresia": "Pago anticipado"}
        )

        assert response.json()["fechaFinMembresia"] == "2024-06-30"

    @pytest.mark.asyncio
    async def test_update_cadence_rederives_end_date(self, client: AsyncClient):
        """Switching to yearly billing recomputes from the stored start date."""
        category = await _create_category(client)
        created = await _create_company(
            client,
            [category["id"]],
            membershipPeriodicidad="mensual",
            fechaInicioMembresia="2024-01-15",
        )

        response = await client.put(
            f"{COMPANIES_PREFIX}/{created['id']}", json={"membershipPeriodicidad": "anual"}
        )

        assert response.json()["fechaFinMembresia"] == "2025-01-15"

    @pytest.mark.asyncio
    async def test_update_clearing_cadence_keeps_end_date(self, client: AsyncClient):
        """Without a cadence there is nothing to derive, so the stored end date stays."""
        category = await _create_category(client)
        created = await _create_company(
            client,
            [category["id"]],
            membershipPeriodicidad="mensual",
            fechaInicioMembresia="2024-01-15",
        )
        assert created["fechaFinMembresia"] == "2024-02-15"

        response = await client.put(
            f"{COMPANIES_PREFIX}/{created['id']}",
            json={"membershipPeriodicidad": None, "fechaInicioMembresia": "2024-03-01"},
        )

        data = response.json()
        assert response.status_code == 200
        assert data["membershipPeriodicidad"] is None
        assert data["fechaFinMembresia"] == "2024-02-15"

    @pytest.mark.asyncio
    async def test_update_without_cadence_keeps_derived_end_date(self, client: AsyncClient):
        """Edits that leave start date and cadence alone keep the derived end date."""
        category = await _create_category(client)
        created = await _create_company(
            client,
            [category["id"]],
            membershipPeriodicidad="anual",
            fechaInicioMembresia="2024-01-15",
        )

        response = await client.put(
            f"{COMPANIES_PREFIX}/{created['id']}", json={"nombreEmpresa": "Renombrada"}
        )

        assert response.json()["fechaFinMembresia"] == "2025-01-15"

    @pytest.mark.asyncio
    async def test_update_not_found(self, client: AsyncClient):
        """Updating an unknown company returns 404."""
        response = await client.put(f"{COMPANIES_PREFIX}/999", json={"nombreEmpresa": "X"})

        assert response.status_code == 404


# ===========================================================================
# DELETE /api/companies/{id}
# ===========================================================================


class TestDeleteCompany:
    """Tests for DELETE /api/companies/{id}."""

    @pytest.mark.asyncio
    async def test_delete_company(self, client: AsyncClient, test_db: AsyncSession):
        """Deleting returns 204 and removes junction rows and opinions."""
        category = await _create_category(client)
        created = await _create_company(client, [category["id"]])
        opinion = await client.post("/api/opinions", json={
            "nombre": "Ana", "email": "ana@example.com", "calificacion": 5,
            "comentario": "Excelente", "companyId": created["id"],
        })
        assert opinion.status_code == 201

        response = await client.delete(f"{COMPANIES_PREFIX}/{created['id']}")

        assert response.status_code == 204
        assert (await client.get(f"{COMPANIES_PREFIX}/{created['id']}")).status_code == 404
        links = await test_db.execute(
            select(CompanyCategory).where(CompanyCategory.company_id == created["id"])
        )
        assert links.scalars().all() == []
        opinions = await test_db.execute(select(Opinion).where(Opinion.company_id == created["id"]))
        assert opinions.scalars().all() == []

    @pytest.mark.asyncio
    async def test_delete_company_not_found(self, client: AsyncClient):
        """Deleting an unknown company returns 404."""
        response = await client.delete(f"{COMPANIES_PREFIX}/999")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_company_twice(self, client: AsyncClient):
        """A second delete of the same company is a clean 404."""
        category = await _create_category(client)
        created = await _create_company(client, [category["id"]])

        first = await client.delete(f"{COMPANIES_PREFIX}/{created['id']}")
        second = await client.delete(f"{COMPANIES_PREFIX}/{created['id']}")

        assert first.status_code == 204
        assert second.status_code == 404
        assert second.json()["code"] == "RES_001"
        assert (await client.get(COMPANIES_PREFIX)).json()["total"] == 0
