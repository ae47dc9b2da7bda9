import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Actor(BaseModel):
    """
    Identidad autenticada que realiza la solicitud.
    La entrega el proveedor de identidad externo; es inmutable durante la solicitud.

    `rol` se mantiene como texto: un valor desconocido no debe romper la
    validación, sino terminar en visibilidad vacía.
    """
    rol: str = Field(..., description="ADMIN, TECNICO o CLIENTE")
    user_id: uuid.UUID = Field(..., description="ID del usuario autenticado")
    empresa_id: Optional[uuid.UUID] = Field(None, description="Empresa del usuario (solo clientes)")

    model_config = ConfigDict(frozen=True)
