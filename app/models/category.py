from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from app.database import Base


# Symbolic icon names the admin UI knows how to render
CATEGORY_ICONS = (
    "Tags", "Building2", "Car", "Truck", "Hammer", "Factory", "Cpu", "Wrench",
    "ShoppingBag", "Briefcase", "Heart", "GraduationCap", "Home", "Coffee",
    "Camera", "Music", "Gamepad2", "Book", "Palette", "MapPin", "Plane",
    "Ship", "Train", "Zap",
)
DEFAULT_CATEGORY_ICON = "Tags"


class Category(Base):
    """Directory category. Companies reference categories by id."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    nombre_categoria = Column(String(150), unique=True, nullable=False)
    descripcion = Column(Text)
    icono = Column(String(50), default=DEFAULT_CATEGORY_ICON)
    icono_url = Column(String(500))  # Custom image, wins over icono

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def icono_efectivo(self) -> str | None:
        return self.icono_url or self.icono

    def __repr__(self):
        return f"<Category {self.nombre_categoria}>"
