from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
import enum
from app.database import Base


class UserRole(str, enum.Enum):
    admin = "admin"
    representante = "representante"
    user = "user"


class UserStatus(str, enum.Enum):
    activo = "activo"
    inactivo = "inactivo"


class User(Base):
    """Directory user. Identity is owned by the external auth provider."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(128), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255))
    photo_url = Column(String(500))
    role = Column(Enum(UserRole), nullable=False, default=UserRole.user)
    estado = Column(Enum(UserStatus), nullable=False, default=UserStatus.activo)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.email}>"
