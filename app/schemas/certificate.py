from pydantic import Field, field_validator, model_validator
from datetime import date, datetime
from typing import Optional, List

from app.models.certificate import CertificateStatus
from app.schemas.pagination import ListEnvelope
from app.schemas.types import ApiModel, OptionalText, OptionalUrl


class CertificateBase(ApiModel):
    """Base certificate schema."""
    nombre_certificado: str = Field(..., min_length=1, max_length=255)
    descripcion: OptionalText = None
    entidad_emisora: OptionalText = None
    fecha_emision: Optional[date] = None
    fecha_vencimiento: Optional[date] = None
    imagen_url: OptionalUrl = None
    estado: CertificateStatus = CertificateStatus.activo

    @model_validator(mode="after")
    def check_dates(self):
        if self.fecha_emision and self.fecha_vencimiento and self.fecha_vencimiento < self.fecha_emision:
            raise ValueError("fechaVencimiento cannot be earlier than fechaEmision")
        return self


class CertificateCreate(CertificateBase):
    """Schema for creating a certificate."""
    pass


class CertificateUpdate(ApiModel):
    """Schema for updating a certificate (all fields optional)."""
    nombre_certificado: Optional[str] = Field(None, min_length=1, max_length=255)
    descripcion: OptionalText = None
    entidad_emisora: OptionalText = None
    fecha_emision: Optional[date] = None
    fecha_vencimiento: Optional[date] = None
    imagen_url: OptionalUrl = None
    estado: Optional[CertificateStatus] = None

    @field_validator("nombre_certificado", "estado", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be cleared")
        return v


class CertificateResponse(ApiModel):
    """Schema for certificate response."""
    id: int
    nombre_certificado: str
    descripcion: Optional[str] = None
    entidad_emisora: Optional[str] = None
    fecha_emision: Optional[date] = None
    fecha_vencimiento: Optional[date] = None
    imagen_url: Optional[str] = None
    estado: Optional[CertificateStatus] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CertificateListResponse(ListEnvelope):
    """Certificate list response."""
    certificates: List[CertificateResponse]
