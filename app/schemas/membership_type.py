from pydantic import Field, PlainSerializer, field_validator
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional, List

from app.models.membership_type import PlanVisibility
from app.schemas.pagination import ListEnvelope
from app.schemas.types import ApiModel, OptionalText

# Prices travel as JSON numbers, but are handled as Decimal in Python
Price = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class PriceOption(ApiModel):
    """One billing cadence of a plan and what it costs."""
    periodicidad: str = Field(..., min_length=1, max_length=50)
    costo: Price


class MembershipTypeBase(ApiModel):
    """Base membership plan schema."""
    nombre_plan: str = Field(..., min_length=1, max_length=150)
    descripcion_plan: OptionalText = None
    opciones_precios: List[PriceOption] = Field(..., min_length=1)
    beneficios: List[str] = Field(default_factory=list)
    visibilidad: PlanVisibility = PlanVisibility.publica


class MembershipTypeCreate(MembershipTypeBase):
    """Schema for creating a membership plan."""
    pass


class MembershipTypeUpdate(ApiModel):
    """Schema for updating a membership plan (all fields optional)."""
    nombre_plan: Optional[str] = Field(None, min_length=1, max_length=150)
    descripcion_plan: OptionalText = None
    opciones_precios: Optional[List[PriceOption]] = Field(None, min_length=1)
    beneficios: Optional[List[str]] = None
    visibilidad: Optional[PlanVisibility] = None

    @field_validator("nombre_plan", "opciones_precios", "visibilidad", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be cleared")
        return v


class MembershipTypeResponse(ApiModel):
    """Schema for membership plan response.

    ``opcionesPrecios`` may be empty for plans created before price options
    were required; such plans have no computable price.
    """
    id: int
    nombre_plan: str
    descripcion_plan: Optional[str] = None
    opciones_precios: List[PriceOption] = Field(default_factory=list)
    beneficios: List[str] = Field(default_factory=list)
    visibilidad: Optional[PlanVisibility] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MembershipTypeListResponse(ListEnvelope):
    """Membership plan list response."""
    membership_types: List[MembershipTypeResponse]


class PriceLookupResponse(ApiModel):
    """Price of a plan for one billing cadence. ``costo`` is null when the
    plan has no matching price and the client should offer "contact us"."""
    membership_type_id: int
    periodicidad: str
    costo: Optional[Price] = None
    contact_for_price: bool
    etiqueta: str


class EndDateResponse(ApiModel):
    """Derived membership end date; null when the cadence is not recognised."""
    fecha_inicio: date
    periodicidad: str
    fecha_fin: Optional[date] = None
