from sqlalchemy import Column, Integer, String, DateTime, Text, Enum, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
import enum
from app.database import Base


class OpinionStatus(str, enum.Enum):
    pendiente = "pendiente"
    aprobada = "aprobada"
    rechazada = "rechazada"


class Opinion(Base):
    """Review of a company, published only once a moderator approves it."""

    __tablename__ = "opinions"
    __table_args__ = (
        CheckConstraint("calificacion BETWEEN 1 AND 5", name="ck_opinions_calificacion"),
    )

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    calificacion = Column(Integer, nullable=False)
    comentario = Column(Text, nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    estado = Column(Enum(OpinionStatus), nullable=False, default=OpinionStatus.pendiente, index=True)

    # Moderation stamp
    aprobado_por = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))
    fecha_aprobacion = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Opinion {self.id} company={self.company_id} {self.estado}>"
