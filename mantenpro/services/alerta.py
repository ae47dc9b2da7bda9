import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from mantenpro.schemas.actor import Actor
from mantenpro.schemas.alerta import AlertasResponse

from .clasificador import agregar_alertas
from .equipo import equipo_service
from .mantenimiento import mantenimiento_service

logger = logging.getLogger(__name__)


class AlertaService:
    """
    Carga los registros visibles para el actor que pueden generar alertas y
    delega la clasificación en `agregar_alertas`. Solo lectura.
    """

    def get_alertas(self, db: Session, actor: Actor, ahora: datetime, zona: Optional[ZoneInfo] = None) -> AlertasResponse:
        logger.info(f"Calculando alertas para actor {actor.user_id} ({actor.rol}).")

        # Solo los estados que pueden generar alerta; el clasificador vuelve a validarlos
        mantenimientos = mantenimiento_service.get_activos(db, actor)
        equipos = equipo_service.get_criticos(db, actor)
        logger.debug(f"Candidatos a alerta: {len(mantenimientos)} mantenimientos activos, {len(equipos)} equipos críticos.")

        return agregar_alertas(mantenimientos, equipos, ahora, zona)


alerta_service = AlertaService()
