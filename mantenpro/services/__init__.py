"""
Módulo de Servicios

Este paquete contiene la lógica de negocio y las interacciones
con la base de datos para las diferentes entidades de la aplicación.

Las lecturas de equipos, mantenimientos e historial pasan siempre por el
filtro de visibilidad (`visibilidad.build_visibility_filter`). Las alertas
se derivan en `clasificador` y nunca se persisten.
"""

from .empresa import empresa_service
from .usuario import usuario_service
from .equipo import equipo_service
from .mantenimiento import mantenimiento_service
from .historial import historial_service
from .alerta import alerta_service
from .dashboard import dashboard_service

__all__ = [
    "empresa_service",
    "usuario_service",
    "equipo_service",
    "mantenimiento_service",
    "historial_service",
    "alerta_service",
    "dashboard_service",
]
