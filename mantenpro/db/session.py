from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from mantenpro.core.config import settings

DATABASE_URL = str(settings.DATABASE_URI)

# SQLite en memoria (pruebas) necesita una única conexión compartida entre hilos
if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    # pool_pre_ping habilita una comprobación de conexión antes de usarla del pool
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
