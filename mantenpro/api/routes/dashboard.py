import logging
from typing import Any
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mantenpro.api import deps
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.dashboard import DashboardStats
from mantenpro.services.dashboard import dashboard_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/stats",
            response_model=DashboardStats,
            summary="Obtener estadísticas del Dashboard",
            )
def get_dashboard_stats(
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
    ahora: datetime = Depends(deps.get_ahora),
) -> Any:
    """
    Obtiene las estadísticas del panel principal, limitadas a lo que el actor puede ver.

    `mantenimientos_por_mes` abarca 6 meses calendario completos (el actual y los 5
    anteriores, desde el día 1), de modo que el primer mes del gráfico nunca queda parcial.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) solicitando estadísticas del dashboard.")
    return dashboard_service.get_stats(db, actor, ahora)
