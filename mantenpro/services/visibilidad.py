"""
Filtro de visibilidad por rol.

Convierte `(actor, tipo de registro)` en una expresión booleana de SQLAlchemy
que se combina con cualquier otro filtro vía `.where()`. Es la única fuente
de las reglas de visibilidad; ninguna ruta debe reconstruirlas con if/else.

| Rol                    | equipo                              | mantenimiento / historial         |
|------------------------|-------------------------------------|-----------------------------------|
| ADMIN                  | sin restricción                     | sin restricción                   |
| CLIENTE con empresa    | `empresa_id` del actor              | equipos de la empresa del actor   |
| CLIENTE sin empresa    | vacío                               | vacío                             |
| TECNICO                | equipos de sus propios mantenimientos | `tecnico_id == user_id`         |
| rol desconocido        | vacío                               | vacío                             |
"""
import logging
from typing import Callable, Dict

from sqlalchemy import ColumnElement, false, select, true

from mantenpro.core.permissions import ADMIN_ROLE_NAME, CLIENTE_ROLE_NAME, TECNICO_ROLE_NAME
from mantenpro.models.equipo import Equipo
from mantenpro.models.historial import Historial
from mantenpro.models.mantenimiento import Mantenimiento
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.enums import TipoRegistroEnum

logger = logging.getLogger(__name__)

FiltroVisibilidad = ColumnElement[bool]


def _filtro_admin(actor: Actor, tipo_registro: TipoRegistroEnum) -> FiltroVisibilidad:
    return true()


def _filtro_cliente(actor: Actor, tipo_registro: TipoRegistroEnum) -> FiltroVisibilidad:
    if actor.empresa_id is None:
        logger.warning(f"Actor CLIENTE {actor.user_id} sin empresa asociada: visibilidad vacía sobre '{tipo_registro.value}'.")
        return false()

    if tipo_registro == TipoRegistroEnum.EQUIPO:
        return Equipo.empresa_id == actor.empresa_id

    # correlate(None): la consulta externa puede hacer join con equipos (búsqueda)
    equipos_empresa = select(Equipo.id).where(Equipo.empresa_id == actor.empresa_id).correlate(None)
    if tipo_registro == TipoRegistroEnum.MANTENIMIENTO:
        return Mantenimiento.equipo_id.in_(equipos_empresa)
    return Historial.equipo_id.in_(equipos_empresa)


def _filtro_tecnico(actor: Actor, tipo_registro: TipoRegistroEnum) -> FiltroVisibilidad:
    if tipo_registro == TipoRegistroEnum.EQUIPO:
        # Solo equipos alcanzables a través de sus propios mantenimientos
        equipos_asignados = (
            select(Mantenimiento.equipo_id)
            .where(Mantenimiento.tecnico_id == actor.user_id)
            .distinct()
            .correlate(None)
        )
        return Equipo.id.in_(equipos_asignados)
    if tipo_registro == TipoRegistroEnum.MANTENIMIENTO:
        return Mantenimiento.tecnico_id == actor.user_id
    return Historial.tecnico_id == actor.user_id


_FILTROS_POR_ROL: Dict[str, Callable[[Actor, TipoRegistroEnum], FiltroVisibilidad]] = {
    ADMIN_ROLE_NAME: _filtro_admin,
    CLIENTE_ROLE_NAME: _filtro_cliente,
    TECNICO_ROLE_NAME: _filtro_tecnico,
}


def build_visibility_filter(actor: Actor, tipo_registro: TipoRegistroEnum) -> FiltroVisibilidad:
    """
    Devuelve el filtro de visibilidad del actor para el tipo de registro indicado.
    Un rol no reconocido nunca equivale a ADMIN: produce un filtro vacío.
    """
    constructor = _FILTROS_POR_ROL.get(actor.rol)
    if constructor is None:
        logger.warning(f"Rol no reconocido '{actor.rol}' para actor {actor.user_id}: visibilidad vacía sobre '{tipo_registro.value}'.")
        return false()
    return constructor(actor, tipo_registro)
