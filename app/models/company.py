from sqlalchemy import Column, Integer, String, DateTime, Date, Text, JSON, Enum, ForeignKey
from sqlalchemy.sql import func
import enum
from app.database import Base


class CompanyStatus(str, enum.Enum):
    activo = "activo"
    inactivo = "inactivo"
    pendiente = "pendiente"


class MembershipPeriodicity(str, enum.Enum):
    mensual = "mensual"
    anual = "anual"


class PaymentMethod(str, enum.Enum):
    efectivo = "efectivo"
    transferencia = "transferencia"
    otro = "otro"


class Company(Base):
    """
    Directory listing for a business.

    Categories and certificates are exposed to clients as ordered id lists
    (``categoriesIds`` / ``certificateIds``) but stored in the
    ``company_categories`` / ``company_certificates`` junction tables so the
    database enforces the references. CompanyStore keeps the two in sync.
    """

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    nombre_empresa = Column(String(255), nullable=False, index=True)

    # Contact
    email1 = Column(String(255), nullable=False)
    email2 = Column(String(255))
    email3 = Column(String(255))
    telefono1 = Column(String(50))
    telefono2 = Column(String(50))
    telefono3 = Column(String(50))
    sitio_web = Column(String(500))

    # Profile
    descripcion_empresa = Column(Text)  # Rich text (HTML)
    direccion_fisica = Column(String(500))
    ubicacion_geografica = Column(JSON)  # {"lat": float, "lng": float, "address": str}
    logotipo_url = Column(String(500))
    catalogo_digital_url = Column(String(500))
    galeria_productos_urls = Column(JSON, default=list)
    video_url1 = Column(String(500))
    video_url2 = Column(String(500))
    video_url3 = Column(String(500))
    redes_sociales = Column(JSON, default=list)  # [{"plataforma": str, "url": str}]
    representantes_ventas = Column(JSON, default=list)
    paises_presencia = Column(JSON, default=list)
    estados_presencia = Column(JSON, default=list)
    ciudades_presencia = Column(JSON, default=list)

    # Membership
    membership_type_id = Column(Integer, ForeignKey("membership_types.id", ondelete="SET NULL"), index=True)
    membership_periodicidad = Column(Enum(MembershipPeriodicity))
    forma_pago = Column(Enum(PaymentMethod))
    fecha_inicio_membresia = Column(Date)
    fecha_fin_membresia = Column(Date)
    notas_membresia = Column(Text)

    estado = Column(Enum(CompanyStatus), nullable=False, default=CompanyStatus.activo, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Company {self.nombre_empresa}>"


class CompanyCategory(Base):
    """Company -> Category link. ``position`` keeps the client's id order."""

    __tablename__ = "company_categories"

    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)


class CompanyCertificate(Base):
    """Company -> Certificate link. ``position`` keeps the client's id order."""

    __tablename__ = "company_certificates"

    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True)
    certificate_id = Column(Integer, ForeignKey("certificates.id", ondelete="CASCADE"), primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)
