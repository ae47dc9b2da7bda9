"""
Clasificador de alertas de mantenimiento.

Funciones puras: dependen solo de sus argumentos y del "ahora" que se les
inyecta. Lo usan tanto el endpoint de alertas como el resaltado de filas del
listado de mantenimientos, de modo que ambos clasifican exactamente igual.

Reglas por mantenimiento (se evalúan en cada llamada, no es un FSM persistido):

* COMPLETADO / CANCELADO: nunca generan alerta.
* `dias = fecha_programada (fecha calendario) - hoy (fecha calendario)`,
  ambas en la zona horaria configurada, sin hora del día.
* `dias < 0` y estado PROGRAMADO / EN_PROCESO: ATRASADO, prioridad ALTA.
* `0 <= dias <= 3` y estado PROGRAMADO: PROXIMO, ALTA si `dias <= 1`, si no MEDIA.

Reglas por equipo: EN_MANTENIMIENTO es CRITICO / MEDIA, DADO_DE_BAJA es
CRITICO / ALTA; ACTIVO e INACTIVO no generan alerta.
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from mantenpro.core.config import settings
from mantenpro.core.exceptions import FechaProgramadaFaltanteError
from mantenpro.schemas.alerta import (
    Alerta, AlertasResponse, ContadoresAlertas, EquipoResumen, EstadoAlertaFila
)
from mantenpro.schemas.enums import (
    EstadoEquipoEnum, EstadoMantenimientoEnum, PrioridadAlertaEnum, TipoAlertaEnum
)

logger = logging.getLogger(__name__)

VENTANA_PROXIMO_DIAS = 3
UMBRAL_PRIORIDAD_ALTA_DIAS = 1

ESTADOS_EXENTOS = frozenset({EstadoMantenimientoEnum.COMPLETADO.value, EstadoMantenimientoEnum.CANCELADO.value})
ESTADOS_ACTIVOS = frozenset({EstadoMantenimientoEnum.PROGRAMADO.value, EstadoMantenimientoEnum.EN_PROCESO.value})

# estado del equipo -> (prioridad, etiqueta para el mensaje)
ESTADOS_CRITICOS: Dict[str, Tuple[PrioridadAlertaEnum, str]] = {
    EstadoEquipoEnum.EN_MANTENIMIENTO.value: (PrioridadAlertaEnum.MEDIA, "En Mantenimiento"),
    EstadoEquipoEnum.DADO_DE_BAJA.value: (PrioridadAlertaEnum.ALTA, "Dado de Baja"),
}

ORDEN_PRIORIDAD: Dict[PrioridadAlertaEnum, int] = {
    PrioridadAlertaEnum.ALTA: 0,
    PrioridadAlertaEnum.MEDIA: 1,
    PrioridadAlertaEnum.BAJA: 2,
}

FechaLike = Union[date, datetime]


def _valor(campo: Any) -> Any:
    """Acepta tanto enums como su valor en texto (columnas String del ORM)."""
    return getattr(campo, "value", campo)


def _zona(zona: Optional[ZoneInfo]) -> ZoneInfo:
    return zona or ZoneInfo(settings.ZONA_HORARIA)


def a_utc(valor: FechaLike, zona: Optional[ZoneInfo] = None) -> datetime:
    """
    Normaliza a datetime aware en UTC.
    Un datetime naive se interpreta como UTC (SQLite devuelve valores naive);
    una fecha sin hora se toma como medianoche en la zona configurada.
    """
    if isinstance(valor, datetime):
        if valor.tzinfo is None:
            return valor.replace(tzinfo=timezone.utc)
        return valor.astimezone(timezone.utc)
    return datetime.combine(valor, time.min, tzinfo=_zona(zona)).astimezone(timezone.utc)


def fecha_local(valor: FechaLike, zona: Optional[ZoneInfo] = None) -> date:
    """Fecha calendario de `valor` en la zona horaria configurada."""
    if isinstance(valor, datetime):
        return a_utc(valor).astimezone(_zona(zona)).date()
    return valor


def dias_hasta(fecha_programada: FechaLike, ahora: FechaLike, zona: Optional[ZoneInfo] = None) -> int:
    """Días calendario entre hoy y la fecha programada (negativo si ya pasó)."""
    return (fecha_local(fecha_programada, zona) - fecha_local(ahora, zona)).days


def evaluar_mantenimiento(mantenimiento: Any, ahora: FechaLike, zona: Optional[ZoneInfo] = None) -> Optional[EstadoAlertaFila]:
    """
    Devuelve el estado de alerta (tipo y días) de un mantenimiento, o None.

    Raises:
        FechaProgramadaFaltanteError: si un mantenimiento activo no tiene fecha programada.
    """
    estado = _valor(mantenimiento.estado)
    if estado in ESTADOS_EXENTOS:
        return None

    if mantenimiento.fecha_programada is None:
        if estado in ESTADOS_ACTIVOS:
            raise FechaProgramadaFaltanteError(
                f"Mantenimiento {mantenimiento.id} en estado {estado} sin fecha programada.",
                registro_id=mantenimiento.id,
            )
        return None

    dias = dias_hasta(mantenimiento.fecha_programada, ahora, zona)

    if dias < 0 and estado in ESTADOS_ACTIVOS:
        return EstadoAlertaFila(tipo=TipoAlertaEnum.ATRASADO, dias=abs(dias))
    if 0 <= dias <= VENTANA_PROXIMO_DIAS and estado == EstadoMantenimientoEnum.PROGRAMADO.value:
        return EstadoAlertaFila(tipo=TipoAlertaEnum.PROXIMO, dias=dias)
    return None


def evaluar_fila(mantenimiento: Any, ahora: FechaLike, zona: Optional[ZoneInfo] = None) -> Optional[EstadoAlertaFila]:
    """Resaltado de una fila de listado: como `evaluar_mantenimiento`, pero un dato corrupto solo se reporta."""
    try:
        return evaluar_mantenimiento(mantenimiento, ahora, zona)
    except FechaProgramadaFaltanteError as e:
        logger.error(f"Integridad de datos: mantenimiento {e.registro_id} sin resaltado. {e.message}")
        return None


def prioridad_de(fila: EstadoAlertaFila) -> PrioridadAlertaEnum:
    if fila.tipo == TipoAlertaEnum.ATRASADO:
        return PrioridadAlertaEnum.ALTA
    return PrioridadAlertaEnum.ALTA if fila.dias <= UMBRAL_PRIORIDAD_ALTA_DIAS else PrioridadAlertaEnum.MEDIA


def _resumen_equipo(equipo: Any) -> Optional[EquipoResumen]:
    if equipo is None:
        return None
    return EquipoResumen.model_validate(equipo)


def clasificar_mantenimiento(mantenimiento: Any, ahora: FechaLike, zona: Optional[ZoneInfo] = None) -> Optional[Alerta]:
    """Clasifica un mantenimiento en una alerta ATRASADO / PROXIMO, o None."""
    fila = evaluar_mantenimiento(mantenimiento, ahora, zona)
    if fila is None:
        return None

    tipo_mant = str(_valor(mantenimiento.tipo)).lower()
    equipo = mantenimiento.equipo
    tipo_equipo = equipo.tipo if equipo is not None else "desconocido"

    if fila.tipo == TipoAlertaEnum.ATRASADO:
        titulo = "Mantenimiento atrasado"
        mensaje = f"El mantenimiento {tipo_mant} del equipo {tipo_equipo} está atrasado por {fila.dias} día(s)"
    else:
        titulo = "Mantenimiento próximo"
        cuando = "para hoy" if fila.dias == 0 else f"en {fila.dias} día(s)"
        mensaje = f"El mantenimiento {tipo_mant} del equipo {tipo_equipo} está programado {cuando}"

    return Alerta(
        id=f"{fila.tipo.value.lower()}-{mantenimiento.id}",
        tipo=fila.tipo,
        prioridad=prioridad_de(fila),
        titulo=titulo,
        mensaje=mensaje,
        dias=fila.dias,
        mantenimiento_id=mantenimiento.id,
        equipo_id=mantenimiento.equipo_id,
        fecha=a_utc(mantenimiento.fecha_programada, zona),
        equipo=_resumen_equipo(equipo),
    )


def clasificar_equipo(equipo: Any, ahora: FechaLike, zona: Optional[ZoneInfo] = None) -> Optional[Alerta]:
    """Clasifica un equipo en una alerta CRITICO, o None."""
    critico = ESTADOS_CRITICOS.get(_valor(equipo.estado))
    if critico is None:
        return None

    prioridad, etiqueta = critico
    return Alerta(
        id=f"{TipoAlertaEnum.CRITICO.value.lower()}-{equipo.id}",
        tipo=TipoAlertaEnum.CRITICO,
        prioridad=prioridad,
        titulo="Equipo crítico",
        mensaje=f"El equipo {equipo.tipo} ({equipo.marca}) está en estado: {etiqueta}",
        equipo_id=equipo.id,
        fecha=a_utc(ahora, zona),
        equipo=_resumen_equipo(equipo),
    )


def ordenar_alertas(alertas: Iterable[Alerta]) -> List[Alerta]:
    """Prioridad ALTA < MEDIA < BAJA y, dentro de la misma prioridad, fecha ascendente. Orden estable."""
    return sorted(alertas, key=lambda a: (ORDEN_PRIORIDAD[a.prioridad], a_utc(a.fecha)))


def contar_alertas(alertas: Iterable[Alerta]) -> ContadoresAlertas:
    contadores = ContadoresAlertas()
    for alerta in alertas:
        if alerta.tipo == TipoAlertaEnum.ATRASADO:
            contadores.atrasados += 1
        elif alerta.tipo == TipoAlertaEnum.PROXIMO:
            contadores.proximos += 1
        else:
            contadores.criticos += 1
        contadores.total += 1
    return contadores


def agregar_alertas(
    mantenimientos: Iterable[Any],
    equipos: Iterable[Any],
    ahora: FechaLike,
    zona: Optional[ZoneInfo] = None,
) -> AlertasResponse:
    """
    Clasifica un conjunto de registros ya filtrado por visibilidad, ordena y cuenta.
    Un registro con datos corruptos se omite y se reporta en el log sin abortar el lote.
    """
    alertas: Dict[str, Alerta] = {}

    for mantenimiento in mantenimientos:
        try:
            alerta = clasificar_mantenimiento(mantenimiento, ahora, zona)
        except FechaProgramadaFaltanteError as e:
            logger.error(f"Integridad de datos: se omite el mantenimiento {e.registro_id} al generar alertas. {e.message}")
            continue
        if alerta is not None:
            alertas.setdefault(alerta.id, alerta)

    for equipo in equipos:
        alerta = clasificar_equipo(equipo, ahora, zona)
        if alerta is not None:
            alertas.setdefault(alerta.id, alerta)

    ordenadas = ordenar_alertas(alertas.values())
    contadores = contar_alertas(ordenadas)
    logger.debug(
        f"Alertas generadas: total={contadores.total}, atrasados={contadores.atrasados}, "
        f"proximos={contadores.proximos}, criticos={contadores.criticos}"
    )
    return AlertasResponse(alertas=ordenadas, contadores=contadores)
