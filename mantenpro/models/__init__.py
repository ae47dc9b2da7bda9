from .empresa import Empresa
from .equipo import Equipo
from .historial import Historial
from .mantenimiento import Mantenimiento
from .usuario import Usuario


__all__ = [
    "Empresa",
    "Equipo",
    "Historial",
    "Mantenimiento",
    "Usuario",
]
