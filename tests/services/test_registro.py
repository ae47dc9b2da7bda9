from uuid import uuid4

import pytest
from fastapi import HTTPException, status
from pydantic import ValidationError

from mantenpro.schemas.empresa import EmpresaCreate
from mantenpro.schemas.equipo import EquipoCreate
from mantenpro.schemas.usuario import UsuarioCreate
from mantenpro.services import empresa_service, equipo_service, usuario_service


def test_crear_empresa_y_nit_duplicado(db):
    empresa = empresa_service.create(db, obj_in=EmpresaCreate(nombre="Andina S.A.", nit="900123456-7"))
    db.flush()
    assert empresa_service.get_by_nit(db, nit="900123456-7").id == empresa.id

    with pytest.raises(HTTPException) as exc_info:
        empresa_service.create(db, obj_in=EmpresaCreate(nombre="Otra", nit="900123456-7"))
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_crear_usuario_cliente_requiere_empresa():
    with pytest.raises(ValidationError):
        UsuarioCreate(nombre="Cliente", email="cliente@example.com", rol="CLIENTE")


def test_crear_usuario_y_email_duplicado(db, empresa_c1):
    usuario = usuario_service.create(
        db, obj_in=UsuarioCreate(nombre="Ana", email="ana@example.com", rol="CLIENTE", empresa_id=empresa_c1.id)
    )
    db.flush()
    assert usuario.rol == "CLIENTE"
    assert usuario_service.get_by_email(db, email="ana@example.com").id == usuario.id

    with pytest.raises(HTTPException) as exc_info:
        usuario_service.create(db, obj_in=UsuarioCreate(nombre="Ana B", email="ana@example.com", rol="ADMIN"))
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT


def test_crear_usuario_con_empresa_inexistente(db):
    with pytest.raises(HTTPException) as exc_info:
        usuario_service.create(
            db, obj_in=UsuarioCreate(nombre="Luis", email="luis@example.com", rol="CLIENTE", empresa_id=uuid4())
        )
    assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND


def test_listar_usuarios_por_rol(db, admin, tecnico_1, tecnico_2, cliente_c1):
    tecnicos = usuario_service.get_multi(db, rol="TECNICO")
    assert {u.id for u in tecnicos} == {tecnico_1.id, tecnico_2.id}
    assert len(usuario_service.get_multi(db)) == 4


def test_crear_equipo_valida_empresa_y_serial(db, empresa_c1):
    equipo = equipo_service.create(
        db, obj_in=EquipoCreate(empresa_id=empresa_c1.id, tipo="Servidor", marca="Dell", serial="SRV-001")
    )
    db.flush()
    assert equipo.estado == "ACTIVO"
    assert equipo_service.get_by_serial(db, serial="SRV-001").id == equipo.id

    with pytest.raises(HTTPException) as exc_info:
        equipo_service.create(db, obj_in=EquipoCreate(empresa_id=empresa_c1.id, tipo="Laptop", marca="HP", serial="SRV-001"))
    assert exc_info.value.status_code == status.HTTP_409_CONFLICT

    with pytest.raises(HTTPException) as exc_info:
        equipo_service.create(db, obj_in=EquipoCreate(empresa_id=uuid4(), tipo="Laptop", marca="HP", serial="LPT-001"))
    assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND


def test_tecnico_inexistente_o_con_otro_rol(db, tecnico_1, cliente_c1):
    assert usuario_service.get_tecnico_or_error(db, tecnico_1.id).id == tecnico_1.id

    with pytest.raises(HTTPException) as exc_info:
        usuario_service.get_tecnico_or_error(db, uuid4())
    assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND

    with pytest.raises(HTTPException) as exc_info:
        usuario_service.get_tecnico_or_error(db, cliente_c1.id)
    assert exc_info.value.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
