import uuid
from typing import TYPE_CHECKING, List, Optional
from datetime import datetime

from sqlalchemy import String, Text, DateTime, func, ForeignKey, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column

from mantenpro.db.base import Base
if TYPE_CHECKING:
    from .empresa import Empresa
    from .mantenimiento import Mantenimiento
    from .historial import Historial


class Equipo(Base):
    """
    Modelo ORM para la tabla 'equipos'. Cada equipo pertenece a una sola empresa.
    """
    __tablename__ = "equipos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    empresa_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("empresas.id", ondelete="CASCADE"), index=True)
    tipo: Mapped[str] = mapped_column(String(50), index=True)
    marca: Mapped[str] = mapped_column(String(50), index=True)
    modelo: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    serial: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    estado: Mapped[str] = mapped_column(String(30), default="ACTIVO", index=True)
    ubicacion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    empresa: Mapped["Empresa"] = relationship("Empresa", back_populates="equipos", lazy="selectin")
    mantenimientos: Mapped[List["Mantenimiento"]] = relationship(
        "Mantenimiento",
        back_populates="equipo",
        lazy="select",
        cascade="all, delete-orphan"
    )
    historial: Mapped[List["Historial"]] = relationship(
        "Historial",
        back_populates="equipo",
        lazy="select",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Equipo(id={self.id}, tipo='{self.tipo}', serial='{self.serial}')>"
