import uuid
from typing import Optional
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict

from .enums import EstadoMantenimientoEnum, TipoMantenimientoEnum
from .equipo import EquipoSimple, UsuarioSimple
from .alerta import EstadoAlertaFila


# ===============================================================
# Schema para Creación
# ===============================================================
class MantenimientoCreate(BaseModel):
    """Schema utilizado para programar un nuevo mantenimiento."""
    equipo_id: uuid.UUID = Field(..., description="ID del equipo al que se realiza el mantenimiento")
    tecnico_id: uuid.UUID = Field(..., description="ID del técnico asignado")
    tipo: TipoMantenimientoEnum
    estado: EstadoMantenimientoEnum = Field(default=EstadoMantenimientoEnum.PROGRAMADO)
    fecha_programada: datetime = Field(..., description="Fecha y hora en que el mantenimiento está programado")
    fecha_realizada: Optional[datetime] = None
    descripcion: str = Field(..., min_length=1)
    observaciones: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


# ===============================================================
# Schemas para Actualización
# ===============================================================
class MantenimientoUpdate(BaseModel):
    """
    Actualización parcial. Reprogramar (`fecha_programada`) es la forma de mover o
    resolver una alerta ATRASADO / PROXIMO.
    """
    tipo: Optional[TipoMantenimientoEnum] = None
    descripcion: Optional[str] = Field(None, min_length=1)
    fecha_programada: Optional[datetime] = None
    fecha_realizada: Optional[datetime] = Field(None, description="Si se completa sin fecha, se usa la fecha actual")
    observaciones: Optional[str] = None
    estado: Optional[EstadoMantenimientoEnum] = None

    model_config = ConfigDict(use_enum_values=True)


class MantenimientoCambioEstado(BaseModel):
    estado: EstadoMantenimientoEnum
    fecha_realizada: Optional[datetime] = Field(None, description="Si se completa sin fecha, se usa la fecha actual")
    observaciones: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


# ===============================================================
# Schema para Respuesta API
# ===============================================================
class Mantenimiento(BaseModel):
    id: uuid.UUID
    equipo_id: uuid.UUID
    tecnico_id: uuid.UUID
    tipo: TipoMantenimientoEnum
    estado: EstadoMantenimientoEnum
    fecha_programada: Optional[datetime] = None
    fecha_realizada: Optional[datetime] = None
    descripcion: str
    observaciones: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    equipo: EquipoSimple
    tecnico: UsuarioSimple
    # Lo rellena la ruta con el mismo clasificador que usa /alertas
    alerta: Optional[EstadoAlertaFila] = None

    model_config = ConfigDict(from_attributes=True)
