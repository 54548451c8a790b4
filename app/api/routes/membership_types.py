from fastapi import APIRouter, Query, status
from datetime import date
from typing import Union

from app.api.deps import DbSession
from app.exceptions import NotFoundError
from app.models.membership_type import MembershipType, PlanVisibility
from app.schemas.membership_type import (
    MembershipTypeCreate,
    MembershipTypeUpdate,
    MembershipTypeResponse,
    MembershipTypeListResponse,
    PriceLookupResponse,
    EndDateResponse,
)
from app.schemas.pagination import unpaginated
from app.services.company_store import MembershipTypeStore
from app.services.membership_pricing import derive_end_date, find_price, format_amount

router = APIRouter()


def _plan_data(plan_data: Union[MembershipTypeCreate, MembershipTypeUpdate], exclude_unset: bool = False) -> dict:
    data = plan_data.model_dump(exclude_unset=exclude_unset)
    # JSON columns need plain numbers, not Decimal
    if data.get("opciones_precios") is not None:
        data["opciones_precios"] = [o.model_dump(mode="json") for o in plan_data.opciones_precios]
    return data


def _plan_list(plans) -> MembershipTypeListResponse:
    return MembershipTypeListResponse(
        membership_types=[MembershipTypeResponse.model_validate(p) for p in plans],
        **unpaginated(len(plans)),
    )


@router.get("", response_model=MembershipTypeListResponse)
async def list_membership_types(db: DbSession):
    """List every membership plan, public and private."""
    return _plan_list(await MembershipTypeStore(db).list())


@router.get("/public", response_model=MembershipTypeListResponse)
async def list_public_membership_types(db: DbSession):
    """Plans shown on the public pricing page."""
    plans = await MembershipTypeStore(db).list(MembershipType.visibilidad == PlanVisibility.publica)
    return _plan_list(plans)


@router.get("/{membership_type_id}", response_model=MembershipTypeResponse)
async def get_membership_type(membership_type_id: int, db: DbSession):
    """Get a single membership plan by ID."""
    return await MembershipTypeStore(db).get_or_404(membership_type_id)


@router.get("/{membership_type_id}/price", response_model=PriceLookupResponse)
async def get_membership_price(
    membership_type_id: int,
    db: DbSession,
    periodicidad: str = Query(..., min_length=1),
):
    """Price of a plan for one billing cadence.

    A plan without a matching price answers ``contactForPrice: true``
    instead of failing.
    """
    plan = await MembershipTypeStore(db).get_or_404(membership_type_id)
    costo = find_price(plan.opciones_precios, periodicidad)
    return PriceLookupResponse(
        membership_type_id=plan.id,
        periodicidad=periodicidad,
        costo=costo,
        contact_for_price=costo is None,
        etiqueta=format_amount(costo) if costo is not None else "Contactar para precio",
    )


@router.get("/{membership_type_id}/end-date", response_model=EndDateResponse)
async def preview_membership_end_date(
    membership_type_id: int,
    db: DbSession,
    fecha_inicio: date = Query(..., alias="fechaInicio"),
    periodicidad: str = Query(..., min_length=1),
):
    """End date a membership on this plan would get if started on ``fechaInicio``."""
    await MembershipTypeStore(db).get_or_404(membership_type_id)
    return EndDateResponse(
        fecha_inicio=fecha_inicio,
        periodicidad=periodicidad,
        fecha_fin=derive_end_date(fecha_inicio, periodicidad),
    )


@router.post("", response_model=MembershipTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_membership_type(plan_data: MembershipTypeCreate, db: DbSession):
    """Create a new membership plan."""
    return await MembershipTypeStore(db).create(_plan_data(plan_data))


@router.put("/{membership_type_id}", response_model=MembershipTypeResponse)
async def update_membership_type(membership_type_id: int, plan_data: MembershipTypeUpdate, db: DbSession):
    """Update a membership plan."""
    plan = await MembershipTypeStore(db).update(membership_type_id, _plan_data(plan_data, exclude_unset=True))
    if plan is None:
        raise NotFoundError("MembershipType", membership_type_id)
    return plan


@router.delete("/{membership_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_membership_type(membership_type_id: int, db: DbSession):
    """Delete a plan. Companies on it keep their dates but lose the plan."""
    if not await MembershipTypeStore(db).delete(membership_type_id):
        raise NotFoundError("MembershipType", membership_type_id)
