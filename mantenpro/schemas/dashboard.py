from typing import Dict, List

from pydantic import BaseModel, Field

from .mantenimiento import Mantenimiento


# Schema auxiliar para la serie mensual del gráfico
class MantenimientosPorMes(BaseModel):
    mes: str = Field(..., description="Mes en formato YYYY-MM")
    tipo: str
    count: int = Field(..., ge=0)


# Schema principal para las estadísticas del dashboard
class DashboardStats(BaseModel):
    total_equipos: int = Field(..., ge=0, description="Número total de equipos visibles")
    equipos_por_estado: Dict[str, int] = Field(..., description="Conteo de equipos por estado")
    total_mantenimientos: int = Field(..., ge=0)
    mantenimientos_por_estado: Dict[str, int]
    mantenimientos_por_tipo: Dict[str, int]
    completados_este_mes: int = Field(..., ge=0)
    cambio_completados: int = Field(..., description="Variación porcentual frente al mes anterior")
    equipos_criticos: int = Field(..., ge=0, description="Equipos en mantenimiento o dados de baja")
    mantenimientos_pendientes: int = Field(..., ge=0, description="Programados + en proceso")
    cambio_pendientes: int = Field(..., description="Variación porcentual frente a los pendientes creados antes de este mes")
    proximos_mantenimientos: List[Mantenimiento] = Field(..., description="Los 10 próximos mantenimientos activos")
    mantenimientos_por_mes: List[MantenimientosPorMes] = Field(
        ...,
        description=(
            "Mantenimientos por mes de fecha programada y tipo. Cubre 6 meses calendario completos en la zona "
            "configurada, incluido el actual: desde el día 1 del mes de hace 5 meses, no una ventana móvil de 6 meses."
        ),
    )
