import os

# La BD de pruebas es SQLite en memoria; debe fijarse antes de importar la app
os.environ["DATABASE_URI"] = "sqlite://"
os.environ.setdefault("ZONA_HORARIA", "America/Bogota")

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Callable, Dict, Generator, Optional
from uuid import uuid4
from datetime import datetime, timezone
import logging

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import sessionmaker, Session

from mantenpro.models import Empresa, Equipo, Historial, Mantenimiento, Usuario
from mantenpro.main import app as fastapi_app
from mantenpro.core.security import create_access_token
from mantenpro.db.base import Base
from mantenpro.db.session import engine
from mantenpro.api.deps import get_db, get_ahora

# Configuración básica de logging para los tests
logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] [%(name)s] [%(funcName)s] %(message)s')
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)

# "Ahora" fijo: 2024-06-10 12:00 en America/Bogota (UTC-5)
AHORA = datetime(2024, 6, 10, 17, 0, tzinfo=timezone.utc)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """
    Fixture que proporciona la instancia de la aplicación FastAPI para los tests.
    """
    return fastapi_app

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Sesión de BD por test sobre un esquema recién creado (las rutas hacen commit)."""
    Base.metadata.create_all(bind=engine)
    db_session = TestingSessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=engine)

@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI, db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP asíncrono con la sesión del test y el reloj fijo."""
    def override_get_db_for_test():
        yield db

    app.dependency_overrides[get_db] = override_get_db_for_test
    app.dependency_overrides[get_ahora] = lambda: AHORA

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_ahora, None)


@pytest.fixture(scope="session")
def ahora() -> datetime:
    return AHORA

@pytest.fixture(scope="session")
def headers_para() -> Callable[..., Dict[str, str]]:
    """Cabecera Authorization con un token emitido como lo haría el proveedor de identidad."""
    def _headers(user_id, rol: str, empresa_id=None) -> Dict[str, str]:
        token = create_access_token(user_id, rol=rol, empresa_id=empresa_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers

@pytest.fixture(scope="session")
def headers_de(headers_para) -> Callable[[Usuario], Dict[str, str]]:
    def _headers(usuario: Usuario) -> Dict[str, str]:
        return headers_para(usuario.id, usuario.rol, usuario.empresa_id)
    return _headers


# --- Fábricas ---

@pytest.fixture(scope="function")
def crear_empresa(db: Session) -> Callable[..., Empresa]:
    def _crear(nombre: Optional[str] = None) -> Empresa:
        sufijo = uuid4().hex[:8]
        empresa = Empresa(nombre=nombre or f"Empresa {sufijo}", nit=f"NIT-{sufijo}")
        db.add(empresa); db.flush(); db.refresh(empresa)
        return empresa
    return _crear

@pytest.fixture(scope="function")
def crear_usuario(db: Session) -> Callable[..., Usuario]:
    def _crear(rol: str, empresa: Optional[Empresa] = None, nombre: Optional[str] = None) -> Usuario:
        sufijo = uuid4().hex[:8]
        usuario = Usuario(
            nombre=nombre or f"{rol.title()} {sufijo}",
            email=f"{rol.lower()}_{sufijo}@example.com",
            rol=rol,
            empresa_id=empresa.id if empresa else None,
            activo=True,
        )
        db.add(usuario); db.flush(); db.refresh(usuario)
        return usuario
    return _crear

@pytest.fixture(scope="function")
def crear_equipo(db: Session) -> Callable[..., Equipo]:
    def _crear(empresa: Empresa, estado: str = "ACTIVO", tipo: str = "Laptop", marca: str = "Dell", modelo: Optional[str] = "Latitude") -> Equipo:
        equipo = Equipo(
            empresa_id=empresa.id,
            tipo=tipo,
            marca=marca,
            modelo=modelo,
            serial=f"SN-{uuid4().hex[:10].upper()}",
            estado=estado,
        )
        db.add(equipo); db.flush(); db.refresh(equipo)
        return equipo
    return _crear

@pytest.fixture(scope="function")
def crear_mantenimiento(db: Session) -> Callable[..., Mantenimiento]:
    def _crear(
        equipo: Equipo,
        tecnico: Usuario,
        fecha_programada: Optional[datetime],
        estado: str = "PROGRAMADO",
        tipo: str = "PREVENTIVO",
        descripcion: str = "Revisión general",
        fecha_realizada: Optional[datetime] = None,
    ) -> Mantenimiento:
        mant = Mantenimiento(
            equipo_id=equipo.id,
            tecnico_id=tecnico.id,
            tipo=tipo,
            estado=estado,
            fecha_programada=fecha_programada,
            fecha_realizada=fecha_realizada,
            descripcion=descripcion,
        )
        db.add(mant); db.flush(); db.refresh(mant)
        return mant
    return _crear

@pytest.fixture(scope="function")
def crear_historial(db: Session) -> Callable[..., Historial]:
    def _crear(equipo: Equipo, tecnico: Usuario, fecha: datetime, observaciones: str = "Entrada de prueba", mantenimiento: Optional[Mantenimiento] = None) -> Historial:
        entrada = Historial(
            equipo_id=equipo.id,
            tecnico_id=tecnico.id,
            mantenimiento_id=mantenimiento.id if mantenimiento else None,
            fecha=fecha,
            observaciones=observaciones,
        )
        db.add(entrada); db.flush(); db.refresh(entrada)
        return entrada
    return _crear


# --- Escenario base: dos empresas, un admin, dos técnicos, un cliente por empresa ---

@pytest.fixture(scope="function")
def empresa_c1(crear_empresa) -> Empresa:
    return crear_empresa("Cliente Uno S.A.S.")

@pytest.fixture(scope="function")
def empresa_c2(crear_empresa) -> Empresa:
    return crear_empresa("Cliente Dos Ltda.")

@pytest.fixture(scope="function")
def admin(crear_usuario) -> Usuario:
    return crear_usuario("ADMIN", nombre="Admin Pruebas")

@pytest.fixture(scope="function")
def tecnico_1(crear_usuario) -> Usuario:
    return crear_usuario("TECNICO", nombre="Técnico Uno")

@pytest.fixture(scope="function")
def tecnico_2(crear_usuario) -> Usuario:
    return crear_usuario("TECNICO", nombre="Técnico Dos")

@pytest.fixture(scope="function")
def cliente_c1(crear_usuario, empresa_c1) -> Usuario:
    return crear_usuario("CLIENTE", empresa=empresa_c1, nombre="Cliente Uno")

@pytest.fixture(scope="function")
def cliente_c2(crear_usuario, empresa_c2) -> Usuario:
    return crear_usuario("CLIENTE", empresa=empresa_c2, nombre="Cliente Dos")
