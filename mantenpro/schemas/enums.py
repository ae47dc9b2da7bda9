from enum import Enum

class RolUsuarioEnum(str, Enum):
    """Roles que puede traer el claim `rol` del token de identidad."""
    ADMIN = "ADMIN"
    TECNICO = "TECNICO"
    CLIENTE = "CLIENTE"

class EstadoEquipoEnum(str, Enum):
    """Valores que coinciden con la columna `estado` de la tabla `equipos`."""
    ACTIVO = "ACTIVO"
    INACTIVO = "INACTIVO"
    EN_MANTENIMIENTO = "EN_MANTENIMIENTO"
    DADO_DE_BAJA = "DADO_DE_BAJA"

class TipoMantenimientoEnum(str, Enum):
    """Valores que coinciden con la columna `tipo` de la tabla `mantenimientos`."""
    PREVENTIVO = "PREVENTIVO"
    CORRECTIVO = "CORRECTIVO"

class EstadoMantenimientoEnum(str, Enum):
    """Valores que coinciden con la columna `estado` de la tabla `mantenimientos`."""
    PROGRAMADO = "PROGRAMADO"
    EN_PROCESO = "EN_PROCESO"
    COMPLETADO = "COMPLETADO"
    CANCELADO = "CANCELADO"

class TipoAlertaEnum(str, Enum):
    """Categorías de alerta derivadas (no persistidas)."""
    ATRASADO = "ATRASADO"
    PROXIMO = "PROXIMO"
    CRITICO = "CRITICO"

class PrioridadAlertaEnum(str, Enum):
    ALTA = "ALTA"
    MEDIA = "MEDIA"
    BAJA = "BAJA"

class TipoRegistroEnum(str, Enum):
    """Tipos de registro sobre los que se aplica el filtro de visibilidad."""
    EQUIPO = "equipo"
    MANTENIMIENTO = "mantenimiento"
    HISTORIAL = "historial"
