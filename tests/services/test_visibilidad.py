from datetime import timedelta
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from mantenpro.models.equipo import Equipo
from mantenpro.models.historial import Historial
from mantenpro.models.mantenimiento import Mantenimiento
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.enums import TipoRegistroEnum
from mantenpro.services.equipo import equipo_service
from mantenpro.services.mantenimiento import mantenimiento_service
from mantenpro.services.visibilidad import build_visibility_filter


def _visibles(db: Session, actor: Actor, modelo, tipo: TipoRegistroEnum) -> set:
    stmt = select(modelo.id).where(build_visibility_filter(actor, tipo))
    return set(db.execute(stmt).scalars().all())


def _actor(usuario) -> Actor:
    return Actor(rol=usuario.rol, user_id=usuario.id, empresa_id=usuario.empresa_id)


def test_admin_ve_todo(db, admin, empresa_c1, empresa_c2, tecnico_1, crear_equipo, crear_mantenimiento, ahora):
    e1 = crear_equipo(empresa_c1)
    e2 = crear_equipo(empresa_c2)
    crear_mantenimiento(e1, tecnico_1, ahora)

    actor = _actor(admin)
    assert _visibles(db, actor, Equipo, TipoRegistroEnum.EQUIPO) == {e1.id, e2.id}
    assert len(_visibles(db, actor, Mantenimiento, TipoRegistroEnum.MANTENIMIENTO)) == 1


def test_cliente_solo_ve_su_empresa(
    db, cliente_c1, empresa_c1, empresa_c2, tecnico_1, crear_equipo, crear_mantenimiento, crear_historial, ahora
):
    propio = crear_equipo(empresa_c1)
    ajeno = crear_equipo(empresa_c2)
    m_propio = crear_mantenimiento(propio, tecnico_1, ahora)
    m_ajeno = crear_mantenimiento(ajeno, tecnico_1, ahora)
    h_propio = crear_historial(propio, tecnico_1, ahora)
    crear_historial(ajeno, tecnico_1, ahora)

    actor = _actor(cliente_c1)
    assert _visibles(db, actor, Equipo, TipoRegistroEnum.EQUIPO) == {propio.id}
    assert _visibles(db, actor, Mantenimiento, TipoRegistroEnum.MANTENIMIENTO) == {m_propio.id}
    assert _visibles(db, actor, Historial, TipoRegistroEnum.HISTORIAL) == {h_propio.id}
    assert mantenimiento_service.get_visible(db, actor, m_propio.id) is not None
    assert mantenimiento_service.get_visible(db, actor, m_ajeno.id) is None


def test_tecnico_ve_equipos_de_sus_mantenimientos(
    db, tecnico_1, tecnico_2, empresa_c1, empresa_c2, crear_equipo, crear_mantenimiento, crear_historial, ahora
):
    e1 = crear_equipo(empresa_c1)
    e2 = crear_equipo(empresa_c2)
    e3 = crear_equipo(empresa_c1)
    crear_equipo(empresa_c2)  # sin mantenimientos
    m1 = crear_mantenimiento(e1, tecnico_1, ahora)
    m2 = crear_mantenimiento(e1, tecnico_1, ahora + timedelta(days=7))
    m3 = crear_mantenimiento(e2, tecnico_1, ahora, estado="COMPLETADO")
    crear_mantenimiento(e3, tecnico_2, ahora)
    h1 = crear_historial(e1, tecnico_1, ahora)
    crear_historial(e3, tecnico_2, ahora)

    actor = _actor(tecnico_1)
    equipos_visibles = _visibles(db, actor, Equipo, TipoRegistroEnum.EQUIPO)
    equipos_de_sus_tareas = set(
        db.execute(select(Mantenimiento.equipo_id).where(Mantenimiento.tecnico_id == tecnico_1.id).distinct()).scalars()
    )
    assert equipos_visibles == equipos_de_sus_tareas == {e1.id, e2.id}
    assert _visibles(db, actor, Mantenimiento, TipoRegistroEnum.MANTENIMIENTO) == {m1.id, m2.id, m3.id}
    assert _visibles(db, actor, Historial, TipoRegistroEnum.HISTORIAL) == {h1.id}
    assert equipo_service.get_visible(db, actor, e3.id) is None


def test_tecnico_sin_asignaciones_no_ve_equipos(db, tecnico_2, empresa_c1, crear_equipo):
    crear_equipo(empresa_c1)
    assert _visibles(db, _actor(tecnico_2), Equipo, TipoRegistroEnum.EQUIPO) == set()


def test_cliente_sin_empresa_no_ve_nada(db, crear_usuario, empresa_c1, tecnico_1, crear_equipo, crear_mantenimiento, ahora):
    equipo = crear_equipo(empresa_c1)
    crear_mantenimiento(equipo, tecnico_1, ahora)
    huerfano = crear_usuario("CLIENTE")

    actor = _actor(huerfano)
    for modelo, tipo in ((Equipo, TipoRegistroEnum.EQUIPO), (Mantenimiento, TipoRegistroEnum.MANTENIMIENTO), (Historial, TipoRegistroEnum.HISTORIAL)):
        assert _visibles(db, actor, modelo, tipo) == set()


def test_rol_desconocido_no_ve_nada(db, empresa_c1, tecnico_1, crear_equipo, crear_mantenimiento, ahora):
    equipo = crear_equipo(empresa_c1)
    crear_mantenimiento(equipo, tecnico_1, ahora)

    actor = Actor(rol="SUPERVISOR", user_id=uuid4(), empresa_id=empresa_c1.id)
    assert _visibles(db, actor, Equipo, TipoRegistroEnum.EQUIPO) == set()
    assert _visibles(db, actor, Mantenimiento, TipoRegistroEnum.MANTENIMIENTO) == set()
    assert equipo_service.get_visible(db, actor, equipo.id) is None


def test_filtro_se_combina_con_otras_condiciones(db, cliente_c1, empresa_c1, crear_equipo):
    activo = crear_equipo(empresa_c1, estado="ACTIVO")
    crear_equipo(empresa_c1, estado="DADO_DE_BAJA")

    filtro = build_visibility_filter(_actor(cliente_c1), TipoRegistroEnum.EQUIPO)
    stmt = select(Equipo.id).where(filtro, Equipo.estado == "ACTIVO")
    assert set(db.execute(stmt).scalars()) == {activo.id}
