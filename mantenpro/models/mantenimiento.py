import uuid
from typing import TYPE_CHECKING, List, Optional
from datetime import datetime

from sqlalchemy import String, Text, DateTime, func, ForeignKey, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column

from mantenpro.db.base import Base

if TYPE_CHECKING:
    from .equipo import Equipo
    from .usuario import Usuario
    from .historial import Historial


class Mantenimiento(Base):
    """
    Modelo ORM para la tabla 'mantenimientos'.
    """
    __tablename__ = "mantenimientos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    equipo_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("equipos.id", ondelete="CASCADE"), index=True)
    tecnico_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("usuarios.id", ondelete="RESTRICT"), index=True)
    tipo: Mapped[str] = mapped_column(String(20), index=True)
    estado: Mapped[str] = mapped_column(String(20), default="PROGRAMADO", index=True)
    # Nullable a nivel de BD por datos heredados; el clasificador lo reporta si falta
    fecha_programada: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    fecha_realizada: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    descripcion: Mapped[str] = mapped_column(Text)
    observaciones: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    equipo: Mapped["Equipo"] = relationship(
        "Equipo",
        back_populates="mantenimientos",
        lazy="selectin"
    )
    tecnico: Mapped["Usuario"] = relationship(
        "Usuario",
        lazy="selectin"
    )
    historial: Mapped[List["Historial"]] = relationship(
        "Historial",
        back_populates="mantenimiento",
        lazy="select",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Mantenimiento(id={self.id}, equipo_id={self.equipo_id}, estado='{self.estado}')>"
