import uuid
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict

from .enums import TipoAlertaEnum, PrioridadAlertaEnum
from .equipo import EmpresaSimple


class EquipoResumen(BaseModel):
    """Datos del equipo que acompañan a una alerta."""
    id: uuid.UUID
    tipo: str
    marca: str
    modelo: Optional[str] = None
    serial: str
    estado: Optional[str] = None
    empresa: Optional[EmpresaSimple] = None

    model_config = ConfigDict(from_attributes=True)


class EstadoAlertaFila(BaseModel):
    """Estado de alerta de una fila de mantenimiento (resaltado en listados)."""
    tipo: TipoAlertaEnum = Field(..., description="ATRASADO o PROXIMO")
    dias: int = Field(..., ge=0, description="Días de atraso (ATRASADO) o días restantes (PROXIMO)")


class Alerta(BaseModel):
    """Alerta derivada. Se calcula en cada lectura y nunca se persiste."""
    id: str = Field(..., description="'{tipo}-{id del registro origen}'")
    tipo: TipoAlertaEnum
    prioridad: PrioridadAlertaEnum
    titulo: str
    mensaje: str
    dias: Optional[int] = Field(None, ge=0, description="Magnitud en días (solo alertas de mantenimiento)")
    mantenimiento_id: Optional[uuid.UUID] = None
    equipo_id: Optional[uuid.UUID] = None
    fecha: datetime = Field(..., description="Fecha asociada, usada para ordenar dentro de la misma prioridad")
    equipo: Optional[EquipoResumen] = None


class ContadoresAlertas(BaseModel):
    atrasados: int = Field(0, ge=0)
    proximos: int = Field(0, ge=0)
    criticos: int = Field(0, ge=0)
    total: int = Field(0, ge=0)


class AlertasResponse(BaseModel):
    alertas: List[Alerta]
    contadores: ContadoresAlertas
