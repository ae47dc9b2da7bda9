import uuid
from typing import Optional

from pydantic import BaseModel

# Schema para los datos contenidos dentro del JWT (payload)
class TokenPayload(BaseModel):
    sub: uuid.UUID | str
    rol: str
    empresa_id: Optional[uuid.UUID | str] = None
