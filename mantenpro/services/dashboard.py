import logging
import math
from collections import Counter
from datetime import date, datetime, time
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session
from sqlalchemy import func as sql_func, select

from mantenpro.core.config import settings
from mantenpro.models.equipo import Equipo
from mantenpro.models.mantenimiento import Mantenimiento
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.dashboard import DashboardStats, MantenimientosPorMes
from mantenpro.schemas.enums import EstadoMantenimientoEnum, TipoRegistroEnum
from mantenpro.schemas.mantenimiento import Mantenimiento as MantenimientoSchema

from .clasificador import ESTADOS_ACTIVOS, ESTADOS_CRITICOS, a_utc, evaluar_fila, fecha_local
from .mantenimiento import mantenimiento_service
from .visibilidad import build_visibility_filter

logger = logging.getLogger(__name__)

MESES_GRAFICO = 6
LIMITE_PROXIMOS = 10


def _mes_anterior(d: date, meses: int = 1) -> date:
    """Primer día del mes que está `meses` meses antes del de `d`."""
    indice = d.year * 12 + (d.month - 1) - meses
    return date(indice // 12, indice % 12 + 1, 1)


def cambio_porcentual(actual: int, anterior: int) -> int:
    """Variación porcentual redondeada; 100 si no había base y ahora hay algo, 0 si no."""
    if anterior > 0:
        # Redondeo half-up, no el redondeo bancario de round()
        return math.floor((actual - anterior) / anterior * 100 + 0.5)
    return 100 if actual > 0 else 0


class DashboardService:
    def get_stats(self, db: Session, actor: Actor, ahora: datetime, zona: Optional[ZoneInfo] = None) -> DashboardStats:
        logger.info(f"Obteniendo estadísticas de dashboard para actor {actor.user_id} ({actor.rol}).")
        zona = zona or ZoneInfo(settings.ZONA_HORARIA)

        filtro_equipos = build_visibility_filter(actor, TipoRegistroEnum.EQUIPO)
        filtro_mant = build_visibility_filter(actor, TipoRegistroEnum.MANTENIMIENTO)

        # Límites de mes en la zona configurada, comparados en UTC
        hoy = fecha_local(ahora, zona)
        inicio_mes_local = hoy.replace(day=1)
        inicio_mes = a_utc(datetime.combine(inicio_mes_local, time.min, tzinfo=zona))
        inicio_mes_anterior = a_utc(datetime.combine(_mes_anterior(inicio_mes_local), time.min, tzinfo=zona))
        inicio_grafico = a_utc(datetime.combine(_mes_anterior(inicio_mes_local, MESES_GRAFICO - 1), time.min, tzinfo=zona))

        equipos_por_estado = self._conteo_por(db, Equipo.estado, filtro_equipos)
        total_equipos = sum(equipos_por_estado.values())
        equipos_criticos = sum(equipos_por_estado.get(estado, 0) for estado in ESTADOS_CRITICOS)

        mantenimientos_por_estado = self._conteo_por(db, Mantenimiento.estado, filtro_mant)
        mantenimientos_por_tipo = self._conteo_por(db, Mantenimiento.tipo, filtro_mant)
        total_mantenimientos = sum(mantenimientos_por_estado.values())
        mantenimientos_pendientes = sum(mantenimientos_por_estado.get(estado, 0) for estado in ESTADOS_ACTIVOS)

        completado = EstadoMantenimientoEnum.COMPLETADO.value
        completados_este_mes = self._contar_mantenimientos(
            db, filtro_mant,
            Mantenimiento.estado == completado,
            Mantenimiento.fecha_realizada >= inicio_mes,
        )
        completados_mes_anterior = self._contar_mantenimientos(
            db, filtro_mant,
            Mantenimiento.estado == completado,
            Mantenimiento.fecha_realizada >= inicio_mes_anterior,
            Mantenimiento.fecha_realizada < inicio_mes,
        )
        pendientes_mes_anterior = self._contar_mantenimientos(
            db, filtro_mant,
            Mantenimiento.estado.in_(list(ESTADOS_ACTIVOS)),
            Mantenimiento.created_at < inicio_mes,
        )
        logger.debug(
            f"Completados: {completados_este_mes} (anterior {completados_mes_anterior}); "
            f"pendientes: {mantenimientos_pendientes} (anterior {pendientes_mes_anterior})."
        )

        proximos: List[MantenimientoSchema] = []
        for mant in mantenimiento_service.get_proximos(db, actor, limit=LIMITE_PROXIMOS):
            fila = MantenimientoSchema.model_validate(mant)
            fila.alerta = evaluar_fila(mant, ahora, zona)
            proximos.append(fila)

        stats = DashboardStats(
            total_equipos=total_equipos,
            equipos_por_estado=equipos_por_estado,
            total_mantenimientos=total_mantenimientos,
            mantenimientos_por_estado=mantenimientos_por_estado,
            mantenimientos_por_tipo=mantenimientos_por_tipo,
            completados_este_mes=completados_este_mes,
            cambio_completados=cambio_porcentual(completados_este_mes, completados_mes_anterior),
            equipos_criticos=equipos_criticos,
            mantenimientos_pendientes=mantenimientos_pendientes,
            cambio_pendientes=cambio_porcentual(mantenimientos_pendientes, pendientes_mes_anterior),
            proximos_mantenimientos=proximos,
            mantenimientos_por_mes=self._por_mes(db, filtro_mant, inicio_grafico, zona),
        )
        logger.info("Estadísticas de dashboard generadas exitosamente.")
        return stats

    def _conteo_por(self, db: Session, columna, filtro) -> Dict[str, int]:
        stmt = select(columna, sql_func.count()).where(filtro).group_by(columna)
        return {valor: cantidad for valor, cantidad in db.execute(stmt).all()}

    def _contar_mantenimientos(self, db: Session, filtro, *condiciones) -> int:
        stmt = select(sql_func.count(Mantenimiento.id)).where(filtro, *condiciones)
        return db.execute(stmt).scalar_one_or_none() or 0

    def _por_mes(self, db: Session, filtro, desde: datetime, zona: ZoneInfo) -> List[MantenimientosPorMes]:
        """Serie mensual por tipo. Se agrupa en Python para no depender del dialecto SQL."""
        stmt = select(Mantenimiento.fecha_programada, Mantenimiento.tipo).where(
            filtro,
            Mantenimiento.fecha_programada.is_not(None),
            Mantenimiento.fecha_programada >= desde,
        )
        conteo: Counter = Counter()
        for fecha_programada, tipo in db.execute(stmt).all():
            mes = fecha_local(fecha_programada, zona).strftime("%Y-%m")
            conteo[(mes, tipo)] += 1
        return [
            MantenimientosPorMes(mes=mes, tipo=tipo, count=cantidad)
            for (mes, tipo), cantidad in sorted(conteo.items())
        ]


dashboard_service = DashboardService()
