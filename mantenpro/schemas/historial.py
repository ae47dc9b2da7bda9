import uuid
from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .enums import EstadoMantenimientoEnum, TipoMantenimientoEnum
from .equipo import EquipoSimple, UsuarioSimple


class MantenimientoRef(BaseModel):
    id: uuid.UUID
    tipo: TipoMantenimientoEnum
    estado: EstadoMantenimientoEnum
    descripcion: str

    model_config = ConfigDict(from_attributes=True)


class Historial(BaseModel):
    id: uuid.UUID
    equipo_id: uuid.UUID
    mantenimiento_id: Optional[uuid.UUID] = None
    tecnico_id: uuid.UUID
    fecha: datetime
    observaciones: str
    equipo: EquipoSimple
    tecnico: UsuarioSimple
    mantenimiento: Optional[MantenimientoRef] = None

    model_config = ConfigDict(from_attributes=True)
