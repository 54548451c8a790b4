from sqlalchemy import Column, Integer, String, DateTime, Date, Text, Enum
from sqlalchemy.sql import func
import enum
from app.database import Base


class CertificateStatus(str, enum.Enum):
    activo = "activo"
    inactivo = "inactivo"


class Certificate(Base):
    """Certification a company can display on its profile."""

    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, index=True)
    nombre_certificado = Column(String(255), nullable=False)
    descripcion = Column(Text)
    entidad_emisora = Column(String(255))
    fecha_emision = Column(Date)
    fecha_vencimiento = Column(Date)
    imagen_url = Column(String(500))
    estado = Column(Enum(CertificateStatus), nullable=False, default=CertificateStatus.activo)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Certificate {self.nombre_certificado}>"
