import uuid
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict, model_validator

from .enums import RolUsuarioEnum


class UsuarioCreate(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    rol: RolUsuarioEnum
    empresa_id: Optional[uuid.UUID] = Field(None, description="Obligatorio para clientes")
    activo: bool = True

    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode='after')
    def check_empresa_cliente(self) -> 'UsuarioCreate':
        if self.rol == RolUsuarioEnum.CLIENTE and self.empresa_id is None:
            raise ValueError('Un usuario CLIENTE debe estar asociado a una empresa.')
        return self


class Usuario(BaseModel):
    id: uuid.UUID
    nombre: str
    email: str
    rol: str
    empresa_id: Optional[uuid.UUID] = None
    activo: bool

    model_config = ConfigDict(from_attributes=True)
