import logging
from typing import Any, List, Optional
from uuid import UUID as PyUUID
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mantenpro.api import deps
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.historial import Historial
from mantenpro.services.historial import historial_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/",
            response_model=List[Historial],
            summary="Consultar historial de equipos",
            )
def read_historial(
    db: Session = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    equipo_id: Optional[PyUUID] = Query(None, description="Filtrar por equipo"),
    tecnico_id: Optional[PyUUID] = Query(None, description="Filtrar por técnico"),
    empresa_id: Optional[PyUUID] = Query(None, description="Filtrar por empresa (solo ADMIN)"),
    fecha_desde: Optional[datetime] = Query(None, description="Desde (inclusive)"),
    fecha_hasta: Optional[datetime] = Query(None, description="Hasta (inclusive)"),
    actor: Actor = Depends(deps.get_current_actor),
) -> Any:
    """
    Obtiene las entradas de historial visibles para el actor, de la más reciente a la más antigua.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) consultando historial.")
    return historial_service.get_multi_with_filters(
        db,
        actor,
        skip=skip,
        limit=limit,
        equipo_id=equipo_id,
        tecnico_id=tecnico_id,
        empresa_id=empresa_id,
        fecha_desde=fecha_desde,
        fecha_hasta=fecha_hasta,
    )
