import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy import select
from fastapi import HTTPException, status

from mantenpro.core.permissions import TECNICO_ROLE_NAME
from mantenpro.models.usuario import Usuario
from mantenpro.schemas.usuario import UsuarioCreate

from .empresa import empresa_service

logger = logging.getLogger(__name__)


class UsuarioService:
    """
    Perfiles de usuario (técnicos asignables y clientes asociados a una empresa).
    Las credenciales viven en el proveedor de identidad. NO realiza commit.
    """

    def get(self, db: Session, id: UUID) -> Optional[Usuario]:
        return db.get(Usuario, id)

    def get_by_email(self, db: Session, *, email: str) -> Optional[Usuario]:
        """Obtiene un usuario por su correo electrónico."""
        statement = select(Usuario).where(Usuario.email == email)
        result = db.execute(statement)
        return result.scalar_one_or_none()

    def get_multi(self, db: Session, *, rol: Optional[str] = None) -> List[Usuario]:
        statement = select(Usuario).order_by(Usuario.nombre)
        if rol:
            statement = statement.where(Usuario.rol == rol)
        return list(db.execute(statement).scalars().all())

    def get_tecnico_or_error(self, db: Session, tecnico_id: UUID) -> Usuario:
        """Devuelve el usuario si existe y tiene rol TECNICO; si no, 404 / 422."""
        tecnico = self.get(db, tecnico_id)
        if not tecnico:
            logger.error(f"Técnico con ID {tecnico_id} no encontrado.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Técnico con ID {tecnico_id} no encontrado.")
        if tecnico.rol != TECNICO_ROLE_NAME:
            logger.warning(f"Usuario {tecnico_id} asignado como técnico pero tiene rol '{tecnico.rol}'.")
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
                detail="El usuario asignado no tiene rol TECNICO."
            )
        return tecnico

    def create(self, db: Session, *, obj_in: UsuarioCreate) -> Usuario:
        """
        Crea un nuevo perfil de usuario.
        NO realiza db.commit().
        """
        logger.debug(f"Intentando crear usuario: {obj_in.email}")
        if self.get_by_email(db, email=obj_in.email):
            logger.warning(f"Intento de crear usuario con email duplicado: {obj_in.email}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Ya existe un usuario con ese correo electrónico.")

        if obj_in.empresa_id and not empresa_service.get(db, obj_in.empresa_id):
            logger.error(f"Empresa con ID {obj_in.empresa_id} no encontrada al crear usuario.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"La empresa con ID {obj_in.empresa_id} no fue encontrada.")

        db_obj = Usuario(**obj_in.model_dump())
        db.add(db_obj)
        logger.info(f"Usuario '{db_obj.email}' ({db_obj.rol}) preparado para ser creado.")
        return db_obj


usuario_service = UsuarioService()
