from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Enum
from sqlalchemy.sql import func
import enum
from app.database import Base


class RoleStatus(str, enum.Enum):
    activo = "activo"
    inactivo = "inactivo"


# Permission catalogue, grouped the way the admin UI shows it
PERMISSIONS = {
    "users.read": "Ver usuarios",
    "users.write": "Gestionar usuarios",
    "companies.read": "Ver empresas",
    "companies.write": "Gestionar empresas",
    "categories.read": "Ver categorías",
    "categories.write": "Gestionar categorías",
    "memberships.read": "Ver membresías",
    "memberships.write": "Gestionar membresías",
    "certificates.read": "Ver certificados",
    "certificates.write": "Gestionar certificados",
    "opinions.read": "Ver opiniones",
    "opinions.write": "Moderar opiniones",
    "roles.read": "Ver roles",
    "roles.write": "Gestionar roles",
    "statistics.read": "Ver estadísticas",
}


class Role(Base):
    """Back-office role: a named set of permission strings."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(100), unique=True, nullable=False)
    descripcion = Column(Text)  # Rich text (HTML) from the admin editor
    permisos = Column(JSON, nullable=False, default=list)
    estado = Column(Enum(RoleStatus), nullable=False, default=RoleStatus.activo)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Role {self.nombre}>"
