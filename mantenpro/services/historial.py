import logging
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy import select

from mantenpro.core.permissions import ADMIN_ROLE_NAME
from mantenpro.models.equipo import Equipo
from mantenpro.models.historial import Historial
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.enums import TipoRegistroEnum

from .base_service import BaseService

logger = logging.getLogger(__name__)


class HistorialService(BaseService[Historial, BaseModel]):
    """
    Bitácora de eventos por equipo.
    Las entradas se crean desde las rutas de mantenimiento y NO realizan commit.
    """

    def registrar(
        self,
        db: Session,
        *,
        equipo_id: UUID,
        tecnico_id: UUID,
        observaciones: str,
        mantenimiento_id: Optional[UUID] = None,
        fecha: Optional[datetime] = None,
    ) -> Historial:
        """Prepara una entrada de historial. La fecha por defecto la pone la base de datos."""
        datos = {
            "equipo_id": equipo_id,
            "tecnico_id": tecnico_id,
            "mantenimiento_id": mantenimiento_id,
            "observaciones": observaciones,
        }
        if fecha is not None:
            datos["fecha"] = fecha
        return self.create(db, obj_in=datos)

    def get_multi_with_filters(
        self,
        db: Session,
        actor: Actor,
        *,
        skip: int = 0,
        limit: int = 100,
        equipo_id: Optional[UUID] = None,
        tecnico_id: Optional[UUID] = None,
        empresa_id: Optional[UUID] = None,
        fecha_desde: Optional[datetime] = None,
        fecha_hasta: Optional[datetime] = None,
    ) -> List[Historial]:
        """Entradas visibles para el actor, de la más reciente a la más antigua."""
        statement = self.select_visible(actor)

        if equipo_id:
            statement = statement.where(Historial.equipo_id == equipo_id)
        if tecnico_id:
            statement = statement.where(Historial.tecnico_id == tecnico_id)
        if empresa_id:
            if actor.rol == ADMIN_ROLE_NAME:
                statement = statement.where(
                    Historial.equipo_id.in_(select(Equipo.id).where(Equipo.empresa_id == empresa_id))
                )
            else:
                logger.info(f"Filtro empresa_id ignorado para actor {actor.user_id} con rol {actor.rol}.")
        if fecha_desde:
            statement = statement.where(Historial.fecha >= fecha_desde)
        if fecha_hasta:
            statement = statement.where(Historial.fecha <= fecha_hasta)

        statement = statement.order_by(Historial.fecha.desc()).offset(skip).limit(limit)
        result = db.execute(statement)
        return list(result.scalars().all())


historial_service = HistorialService(Historial, TipoRegistroEnum.HISTORIAL)
