import datetime
import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Boolean, String, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from sqlalchemy.sql import func

from mantenpro.db.base import Base

if TYPE_CHECKING:
    from .empresa import Empresa


class Usuario(Base):
    """
    Modelo ORM para la tabla 'usuarios'.
    Las credenciales viven en el proveedor de identidad; aquí solo se guarda
    el perfil necesario para asignar técnicos y asociar clientes a su empresa.
    """
    __tablename__ = "usuarios"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    nombre: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    rol: Mapped[str] = mapped_column(String(20), index=True)
    empresa_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("empresas.id", ondelete="SET NULL"), nullable=True, index=True)
    activo: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    empresa: Mapped[Optional["Empresa"]] = relationship("Empresa", back_populates="usuarios", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Usuario(id={self.id}, email='{self.email}', rol='{self.rol}')>"
