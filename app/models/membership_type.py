from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Enum
from sqlalchemy.sql import func
import enum
from app.database import Base


class PlanVisibility(str, enum.Enum):
    publica = "publica"
    privada = "privada"


class MembershipType(Base):
    """
    Paid membership plan.

    A plan offers one or more billing cadences, each with its own price:
        opciones_precios = [{"periodicidad": "mensual", "costo": 99.0}, ...]
    Prices are kept as JSON numbers; the API layer reads them as Decimal.
    """

    __tablename__ = "membership_types"

    id = Column(Integer, primary_key=True, index=True)
    nombre_plan = Column(String(150), nullable=False)
    descripcion_plan = Column(Text)
    opciones_precios = Column(JSON, nullable=False, default=list)
    beneficios = Column(JSON, default=list)  # Ordered list of strings
    visibilidad = Column(Enum(PlanVisibility), nullable=False, default=PlanVisibility.publica)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<MembershipType {self.nombre_plan}>"
