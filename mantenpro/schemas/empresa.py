import uuid
from typing import Optional
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict


class EmpresaCreate(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=255)
    nit: str = Field(..., min_length=1, max_length=50, description="Identificador tributario único")
    contacto: Optional[str] = Field(None, max_length=255)
    telefono: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    direccion: Optional[str] = None


class Empresa(BaseModel):
    id: uuid.UUID
    nombre: str
    nit: str
    contacto: Optional[str] = None
    telefono: Optional[str] = None
    email: Optional[str] = None
    direccion: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
