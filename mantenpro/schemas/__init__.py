from .actor import Actor
from .alerta import Alerta, AlertasResponse, ContadoresAlertas, EquipoResumen, EstadoAlertaFila
from .dashboard import DashboardStats, MantenimientosPorMes
from .empresa import Empresa, EmpresaCreate
from .enums import (
    RolUsuarioEnum,
    EstadoEquipoEnum,
    TipoMantenimientoEnum,
    EstadoMantenimientoEnum,
    TipoAlertaEnum,
    PrioridadAlertaEnum,
    TipoRegistroEnum,
)
from .equipo import Equipo, EquipoCreate, EquipoSimple, EmpresaSimple, UsuarioSimple
from .historial import Historial
from .mantenimiento import Mantenimiento, MantenimientoCreate, MantenimientoCambioEstado
from .token import TokenPayload
from .usuario import Usuario, UsuarioCreate
