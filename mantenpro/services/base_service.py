import logging
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from fastapi import HTTPException, status
from pydantic import BaseModel

from sqlalchemy.orm import Session
from sqlalchemy import Select, select

from mantenpro.db.base import Base
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.enums import TipoRegistroEnum
from .visibilidad import build_visibility_filter

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)

class BaseService(Generic[ModelType, CreateSchemaType]):
    def __init__(self, model: Type[ModelType], tipo_registro: TipoRegistroEnum):
        """
        Servicio base con lecturas filtradas por visibilidad y escrituras sin commit.
        Toda consulta que recibe un `actor` pasa por el filtro de visibilidad.
        El commit debe ser manejado en la capa de la ruta (endpoint).

        **Parámetros**

        * `model`: Clase del modelo SQLAlchemy
        * `tipo_registro`: Tipo de registro para el filtro de visibilidad
        """
        self.model = model
        self.tipo_registro = tipo_registro

    def select_visible(self, actor: Actor) -> Select:
        """SELECT del modelo ya restringido a lo que el actor puede ver."""
        return select(self.model).where(build_visibility_filter(actor, self.tipo_registro))

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        """Obtiene un registro por ID, sin filtro de visibilidad."""
        return db.get(self.model, id)

    def get_visible(self, db: Session, actor: Actor, id: Any) -> Optional[ModelType]:
        """Obtiene un registro por ID solo si es visible para el actor."""
        statement = self.select_visible(actor).where(self.model.id == id)  # type: ignore[attr-defined]
        return db.execute(statement).scalars().first()

    def get_visible_or_404(self, db: Session, actor: Actor, id: Any) -> ModelType:
        """
        Obtiene un registro visible o lanza 404.
        Un registro existente pero invisible responde igual que uno inexistente.
        """
        db_obj = self.get_visible(db, actor, id)
        if not db_obj:
            logger.warning(f"Registro {self.model.__name__} ID {id} no encontrado o no visible para actor {actor.user_id} ({actor.rol}).")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.model.__name__} con ID {id} no encontrado."
            )
        return db_obj

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        Crea un nuevo registro.
        NO realiza db.commit(). El commit debe ser manejado por el llamador.
        """
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        logger.info(f"Nuevo registro preparado para creación en {self.model.__name__} con datos: {obj_in_data}")
        return db_obj

    def update(self, db: Session, *, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """
        Actualiza un objeto existente en la base de datos.
        NO realiza db.commit(). El commit debe ser manejado por el llamador.
        """
        obj_id = getattr(db_obj, 'id', 'N/A')
        logger.debug(f"Actualizando {self.model.__name__} ID {obj_id} con datos: {obj_in}")

        if obj_in:
            for field, value in obj_in.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)
                else:
                    logger.warning(f"Intento de actualizar campo '{field}' inexistente en modelo {self.model.__name__}")
            db.add(db_obj)
            logger.info(f"Registro preparado para actualización en {self.model.__name__} (ID: {obj_id})")
        else:
            logger.info(f"No se proporcionaron datos para actualizar en {self.model.__name__} (ID: {obj_id})")

        return db_obj

    def remove(self, db: Session, *, db_obj: ModelType) -> ModelType:
        """
        Elimina un registro ya verificado como visible.
        NO realiza db.commit(). El commit debe ser manejado por el llamador.
        """
        obj_id = getattr(db_obj, 'id', 'N/A')
        db.delete(db_obj)
        logger.warning(f"Registro preparado para eliminación de {self.model.__name__} (ID: {obj_id})")
        return db_obj
