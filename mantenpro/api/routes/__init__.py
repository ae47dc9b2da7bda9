from fastapi import APIRouter

# Importar los routers individuales de cada módulo
from . import alertas, dashboard, equipos, mantenimientos, historial

# Crear el router principal de la API
api_router = APIRouter()

# Incluir cada router individual con su prefijo y etiquetas
api_router.include_router(alertas.router, prefix="/alertas", tags=["Alertas"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(equipos.router, prefix="/equipos", tags=["Equipos"])
api_router.include_router(mantenimientos.router, prefix="/mantenimientos", tags=["Mantenimiento"])
api_router.include_router(historial.router, prefix="/historial", tags=["Historial"])
