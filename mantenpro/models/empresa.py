import uuid
from typing import TYPE_CHECKING, List, Optional
from datetime import datetime

from sqlalchemy import String, Text, DateTime, func, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column

from mantenpro.db.base import Base

if TYPE_CHECKING:
    from .equipo import Equipo
    from .usuario import Usuario


class Empresa(Base):
    """
    Modelo ORM para la tabla 'empresas' (tenant dueño de los equipos).
    """
    __tablename__ = "empresas"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    nombre: Mapped[str] = mapped_column(String(255), index=True)
    nit: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    contacto: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    telefono: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    direccion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    equipos: Mapped[List["Equipo"]] = relationship(
        "Equipo",
        back_populates="empresa",
        lazy="select",
        cascade="all, delete-orphan"
    )
    usuarios: Mapped[List["Usuario"]] = relationship(
        "Usuario",
        back_populates="empresa",
        lazy="select"
    )

    def __repr__(self) -> str:
        return f"<Empresa(id={self.id}, nombre='{self.nombre}', nit='{self.nit}')>"
