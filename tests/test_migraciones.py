import re
from pathlib import Path

import mantenpro.models as modelos
from mantenpro.db.base import Base

VERSIONES = Path(__file__).resolve().parent.parent / "alembic" / "versions"


def test_modelos_exportados_registran_todas_las_tablas():
    tablas = {getattr(modelos, nombre).__tablename__ for nombre in modelos.__all__}
    assert tablas == set(Base.metadata.tables)


def test_migracion_inicial_crea_las_tablas_del_modelo():
    creadas = set()
    for revision in VERSIONES.glob("*.py"):
        creadas.update(re.findall(r"op\.create_table\(\s*'(\w+)'", revision.read_text(encoding="utf-8")))
    assert creadas == set(Base.metadata.tables)
