from typing import Generator, Union, List, Set
from datetime import datetime, timezone
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
import logging

from mantenpro.core.config import settings
from mantenpro.core import permissions as perms
from mantenpro.core import security
from mantenpro.db.session import SessionLocal
from mantenpro.schemas.actor import Actor

logger = logging.getLogger(__name__)


# --- Dependencia para la Sesión de Base de Datos ---
def get_db() -> Generator[Session, None, None]:
    """Dependency para obtener la sesión de base de datos."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# --- Dependencia para el reloj ---
def get_ahora() -> datetime:
    """Instante actual en UTC. Las pruebas lo sustituyen vía `app.dependency_overrides`."""
    return datetime.now(timezone.utc)


# --- Dependencia para Autenticación ---
# Los tokens los emite el proveedor de identidad; la URL solo documenta el esquema en OpenAPI
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login/access-token"
)

def get_current_actor(token: str = Depends(reusable_oauth2)) -> Actor:
    """Obtiene el actor (rol, usuario, empresa) a partir del token JWT."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudieron validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = security.decode_access_token(token)

    if not token_data or not token_data.sub:
        logger.warning("Error de validación/JWT en token.")
        raise credentials_exception

    try:
        actor = Actor(rol=token_data.rol, user_id=token_data.sub, empresa_id=token_data.empresa_id)
    except ValueError as e:
        logger.warning(f"Claims de identidad inválidos en token: {e}")
        raise credentials_exception

    if actor.rol not in perms.ROLES_SISTEMA:
        # No se rechaza aquí: el filtro de visibilidad lo deja sin acceso
        logger.warning(f"get_current_actor: rol no reconocido '{actor.rol}' para usuario {actor.user_id}.")
    else:
        logger.debug(f"get_current_actor: usuario {actor.user_id} con rol '{actor.rol}' y empresa {actor.empresa_id}.")
    return actor


class RoleChecker:
    """
    Clase para usar como dependencia de FastAPI para verificar el rol del actor.
    Requiere que el actor tenga AL MENOS UNO de los roles de la lista (lógica OR).
    """
    def __init__(self, allowed_roles: Union[str, List[str], Set[str]]):
        if isinstance(allowed_roles, str):
            self.allowed_roles = {allowed_roles}
        else:
            self.allowed_roles = set(allowed_roles)

        if not self.allowed_roles:
            logger.error("RoleChecker inicializado con un conjunto de roles vacío.")
            raise ValueError("El conjunto de roles permitidos no puede estar vacío.")

    def __call__(self, request: Request, actor: Actor = Depends(get_current_actor)) -> Actor:
        """Verifica si el actor actual tiene uno de los roles permitidos."""
        logger.debug(f"RoleChecker: Verificando rol '{actor.rol}' de {actor.user_id} en '{request.url.path}'. Permitidos: {self.allowed_roles}")
        if actor.rol not in self.allowed_roles:
            logger.warning(f"Acceso denegado a {actor.user_id}. Rol: '{actor.rol}'. Roles permitidos: {self.allowed_roles}.")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tiene permiso para realizar esta acción."
            )
        return actor
