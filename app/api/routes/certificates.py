from fastapi import APIRouter, status

from app.api.deps import DbSession
from app.exceptions import NotFoundError, ValidationError
from app.schemas.certificate import (
    CertificateCreate,
    CertificateUpdate,
    CertificateResponse,
    CertificateListResponse,
)
from app.schemas.pagination import unpaginated
from app.services.company_store import CertificateStore

router = APIRouter()


@router.get("", response_model=CertificateListResponse)
async def list_certificates(db: DbSession):
    """List all certificates."""
    certificates = await CertificateStore(db).list()
    return CertificateListResponse(
        certificates=[CertificateResponse.model_validate(c) for c in certificates],
        **unpaginated(len(certificates)),
    )


@router.get("/{certificate_id}", response_model=CertificateResponse)
async def get_certificate(certificate_id: int, db: DbSession):
    """Get a single certificate by ID."""
    return await CertificateStore(db).get_or_404(certificate_id)


@router.post("", response_model=CertificateResponse, status_code=status.HTTP_201_CREATED)
async def create_certificate(certificate_data: CertificateCreate, db: DbSession):
    """Create a new certificate."""
    return await CertificateStore(db).create(certificate_data.model_dump())


@router.put("/{certificate_id}", response_model=CertificateResponse)
async def update_certificate(certificate_id: int, certificate_data: CertificateUpdate, db: DbSession):
    """Update a certificate."""
    store = CertificateStore(db)
    certificate = await store.get_or_404(certificate_id)
    update_data = certificate_data.model_dump(exclude_unset=True)

    # Check the date range against the merged state
    emision = update_data.get("fecha_emision", certificate.fecha_emision)
    vencimiento = update_data.get("fecha_vencimiento", certificate.fecha_vencimiento)
    if emision and vencimiento and vencimiento < emision:
        raise ValidationError.for_field("fechaVencimiento", "Expiry date is before the issue date")

    return await store.update(certificate_id, update_data)


@router.delete("/{certificate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_certificate(certificate_id: int, db: DbSession):
    """Delete a certificate and remove it from every company that lists it."""
    if not await CertificateStore(db).delete(certificate_id):
        raise NotFoundError("Certificate", certificate_id)
