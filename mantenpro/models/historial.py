import uuid
from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlalchemy import Text, DateTime, func, ForeignKey, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column

from mantenpro.db.base import Base

if TYPE_CHECKING:
    from .equipo import Equipo
    from .mantenimiento import Mantenimiento
    from .usuario import Usuario


class Historial(Base):
    """
    Modelo ORM para la tabla 'historial'. Bitácora de lo ocurrido sobre un equipo.
    """
    __tablename__ = "historial"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    equipo_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("equipos.id", ondelete="CASCADE"), index=True)
    mantenimiento_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("mantenimientos.id", ondelete="CASCADE"), nullable=True, index=True)
    tecnico_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("usuarios.id", ondelete="RESTRICT"), index=True)
    fecha: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
    observaciones: Mapped[str] = mapped_column(Text)

    equipo: Mapped["Equipo"] = relationship("Equipo", back_populates="historial", lazy="selectin")
    mantenimiento: Mapped[Optional["Mantenimiento"]] = relationship("Mantenimiento", back_populates="historial", lazy="selectin")
    tecnico: Mapped["Usuario"] = relationship("Usuario", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Historial(id={self.id}, equipo_id={self.equipo_id}, fecha={self.fecha})>"
