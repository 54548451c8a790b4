from pydantic import BeforeValidator, EmailStr, Field, field_validator
from datetime import datetime
from typing import Annotated, Any, Optional, List

from app.models.opinion import OpinionStatus
from app.schemas.pagination import ListEnvelope
from app.schemas.types import ApiModel

# Older clients send the masculine forms
_STATUS_ALIASES = {"aprobado": "aprobada", "rechazado": "rechazada"}


def _normalize_status(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip().lower()
        return _STATUS_ALIASES.get(value, value)
    return value


OpinionStatusInput = Annotated[OpinionStatus, BeforeValidator(_normalize_status)]


class OpinionBase(ApiModel):
    """Base opinion schema."""
    nombre: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    calificacion: int = Field(..., ge=1, le=5)
    comentario: str = Field(..., min_length=1)
    company_id: int


class OpinionCreate(OpinionBase):
    """Schema for submitting an opinion. New opinions await moderation."""
    estado: OpinionStatusInput = OpinionStatus.pendiente


class OpinionUpdate(ApiModel):
    """Schema for updating an opinion (all fields optional)."""
    nombre: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    calificacion: Optional[int] = Field(None, ge=1, le=5)
    comentario: Optional[str] = Field(None, min_length=1)
    estado: Optional[OpinionStatusInput] = None

    @field_validator("nombre", "email", "calificacion", "comentario", "estado", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be cleared")
        return v


class OpinionModerationRequest(ApiModel):
    """Body of approve/reject: the moderating user's id."""
    approved_by: Optional[int] = None


class OpinionResponse(OpinionBase):
    """Schema for opinion response."""
    id: int
    email: str
    estado: OpinionStatus
    aprobado_por: Optional[int] = None
    fecha_aprobacion: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OpinionListResponse(ListEnvelope):
    """Paginated opinion list response."""
    opinions: List[OpinionResponse]
