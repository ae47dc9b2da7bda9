import uuid
from typing import Optional
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict

from .enums import EstadoEquipoEnum


# ===============================================================
# Schemas Simples (para referencias anidadas)
# ===============================================================
class EmpresaSimple(BaseModel):
    id: uuid.UUID
    nombre: str

    model_config = ConfigDict(from_attributes=True)


class UsuarioSimple(BaseModel):
    id: uuid.UUID
    nombre: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class EquipoSimple(BaseModel):
    """Schema simplificado, útil para vistas de lista o referencias rápidas."""
    id: uuid.UUID
    tipo: str
    marca: str
    modelo: Optional[str] = None
    serial: str
    empresa: EmpresaSimple

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# Schema para Respuesta API
# ===============================================================
class Equipo(BaseModel):
    id: uuid.UUID
    empresa_id: uuid.UUID
    tipo: str = Field(..., max_length=50, description="Tipo de equipo (ej: Laptop, Servidor)")
    marca: str = Field(..., max_length=50)
    modelo: Optional[str] = Field(None, max_length=50)
    serial: str = Field(..., max_length=100, description="Número de serie único")
    estado: EstadoEquipoEnum
    ubicacion: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    empresa: EmpresaSimple

    model_config = ConfigDict(from_attributes=True)


# ===============================================================
# Schema para Creación
# ===============================================================
class EquipoCreate(BaseModel):
    empresa_id: uuid.UUID
    tipo: str = Field(..., min_length=1, max_length=50)
    marca: str = Field(..., min_length=1, max_length=50)
    modelo: Optional[str] = Field(None, max_length=50)
    serial: str = Field(..., min_length=1, max_length=100)
    estado: EstadoEquipoEnum = Field(default=EstadoEquipoEnum.ACTIVO)
    ubicacion: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)


# ===============================================================
# Schema para Actualización
# ===============================================================
class EquipoUpdate(BaseModel):
    """Todos los campos son opcionales; solo se aplican los enviados."""
    empresa_id: Optional[uuid.UUID] = Field(None, description="Ignorado para CLIENTE: no puede mover equipos de empresa")
    tipo: Optional[str] = Field(None, min_length=1, max_length=50)
    marca: Optional[str] = Field(None, min_length=1, max_length=50)
    modelo: Optional[str] = Field(None, max_length=50)
    serial: Optional[str] = Field(None, min_length=1, max_length=100)
    estado: Optional[EstadoEquipoEnum] = None
    ubicacion: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)
