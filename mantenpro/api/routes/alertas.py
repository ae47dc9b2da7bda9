import logging
from typing import Any
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mantenpro.api import deps
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.alerta import AlertasResponse
from mantenpro.services.alerta import alerta_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/",
            response_model=AlertasResponse,
            summary="Alertas de mantenimiento del actor",
            )
def read_alertas(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
    ahora: datetime = Depends(deps.get_ahora),
) -> Any:
    """
    Devuelve las alertas derivadas (atrasados, próximos y equipos críticos)
    sobre los registros visibles para el actor, ordenadas por prioridad y fecha,
    junto con sus contadores.
    """
    respuesta = alerta_service.get_alertas(db, actor, ahora)
    logger.info(f"Actor {actor.user_id} ({actor.rol}) obtuvo {respuesta.contadores.total} alertas.")
    return respuesta
