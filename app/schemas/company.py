from pydantic import AfterValidator, EmailStr, Field, field_validator
from datetime import date, datetime
from typing import Annotated, Any, Optional, List

from app.models.company import CompanyStatus, MembershipPeriodicity, PaymentMethod
from app.schemas.category import CategoryResponse
from app.schemas.certificate import CertificateResponse
from app.schemas.membership_type import MembershipTypeResponse
from app.schemas.pagination import ListEnvelope
from app.schemas.types import ApiModel, IdList, OptionalEmail, OptionalText, OptionalUrl, _check_url
from app.schemas.user import UserResponse

MAX_GALLERY_IMAGES = 10

Url = Annotated[str, AfterValidator(_check_url)]


class SocialLink(ApiModel):
    plataforma: str = Field(..., min_length=1, max_length=50)
    url: Url


class GeoLocation(ApiModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None


class CompanyBase(ApiModel):
    """Fields shared by company create and response schemas."""
    nombre_empresa: str = Field(..., min_length=1, max_length=255)

    # Contact
    email1: EmailStr
    email2: OptionalEmail = None
    email3: OptionalEmail = None
    telefono1: OptionalText = None
    telefono2: OptionalText = None
    telefono3: OptionalText = None
    sitio_web: OptionalUrl = None

    # Profile
    descripcion_empresa: OptionalText = None
    direccion_fisica: OptionalText = None
    ubicacion_geografica: Optional[GeoLocation] = None
    logotipo_url: OptionalUrl = None
    catalogo_digital_url: OptionalUrl = None
    galeria_productos_urls: List[Url] = Field(default_factory=list, max_length=MAX_GALLERY_IMAGES)
    video_url1: OptionalUrl = None
    video_url2: OptionalUrl = None
    video_url3: OptionalUrl = None
    redes_sociales: List[SocialLink] = Field(default_factory=list)
    representantes_ventas: List[str] = Field(default_factory=list)
    paises_presencia: List[str] = Field(default_factory=list)
    estados_presencia: List[str] = Field(default_factory=list)
    ciudades_presencia: List[str] = Field(default_factory=list)

    # Membership
    membership_type_id: Optional[int] = None
    membership_periodicidad: Optional[MembershipPeriodicity] = None
    forma_pago: Optional[PaymentMethod] = None
    fecha_inicio_membresia: Optional[date] = None
    fecha_fin_membresia: Optional[date] = None
    notas_membresia: OptionalText = None

    estado: CompanyStatus = CompanyStatus.activo
    user_id: Optional[int] = None


class CompanyCreate(CompanyBase):
    """Schema for creating a company. At least one category is required."""
    categories_ids: IdList = Field(..., min_length=1)
    certificate_ids: IdList = Field(default_factory=list)


class CompanyUpdate(ApiModel):
    """Schema for updating a company (all fields optional).

    Relation id lists are replaced wholesale when present. Required fields
    may be omitted but not cleared: an explicit ``null`` (or an empty
    ``categoriesIds``) is rejected.
    """
    nombre_empresa: Optional[str] = Field(None, min_length=1, max_length=255)
    email1: Optional[EmailStr] = None
    email2: OptionalEmail = None
    email3: OptionalEmail = None
    telefono1: OptionalText = None
    telefono2: OptionalText = None
    telefono3: OptionalText = None
    sitio_web: OptionalUrl = None
    descripcion_empresa: OptionalText = None
    direccion_fisica: OptionalText = None
    ubicacion_geografica: Optional[GeoLocation] = None
    logotipo_url: OptionalUrl = None
    catalogo_digital_url: OptionalUrl = None
    galeria_productos_urls: Optional[List[Url]] = Field(None, max_length=MAX_GALLERY_IMAGES)
    video_url1: OptionalUrl = None
    video_url2: OptionalUrl = None
    video_url3: OptionalUrl = None
    redes_sociales: Optional[List[SocialLink]] = None
    representantes_ventas: Optional[List[str]] = None
    paises_presencia: Optional[List[str]] = None
    estados_presencia: Optional[List[str]] = None
    ciudades_presencia: Optional[List[str]] = None
    categories_ids: Optional[IdList] = Field(None, min_length=1)
    certificate_ids: Optional[IdList] = None
    membership_type_id: Optional[int] = None
    membership_periodicidad: Optional[MembershipPeriodicity] = None
    forma_pago: Optional[PaymentMethod] = None
    fecha_inicio_membresia: Optional[date] = None
    fecha_fin_membresia: Optional[date] = None
    notas_membresia: OptionalText = None
    estado: Optional[CompanyStatus] = None
    user_id: Optional[int] = None

    @field_validator("nombre_empresa", "email1", "categories_ids", "estado", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Field cannot be cleared")
        return v


class CompanyResponse(CompanyBase):
    """Stored company with its relation id lists."""
    id: int
    email1: str
    email2: Optional[str] = None
    email3: Optional[str] = None
    categories_ids: List[int] = Field(default_factory=list)
    certificate_ids: List[int] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanyWithDetails(CompanyResponse):
    """Company with its relations hydrated. Built per request, never stored.

    References to rows that no longer exist are dropped from ``categories``
    and ``certificates`` and resolve to ``null`` for ``membershipType`` and
    ``user``.
    """
    categories: List[CategoryResponse] = Field(default_factory=list)
    certificates: List[CertificateResponse] = Field(default_factory=list)
    membership_type: Optional[MembershipTypeResponse] = None
    user: Optional[UserResponse] = None


class CompanyListResponse(ListEnvelope):
    """Paginated company list response."""
    companies: List[CompanyWithDetails]
