import pytest
from uuid import uuid4
from httpx import AsyncClient
from fastapi import status

from mantenpro.core.config import settings

pytestmark = pytest.mark.asyncio

URL_EQUIPOS = f"{settings.API_V1_STR}/equipos/"


async def test_listar_equipos_admin(client: AsyncClient, headers_de, admin, empresa_c1, empresa_c2, crear_equipo):
    e1 = crear_equipo(empresa_c1, tipo="Laptop")
    e2 = crear_equipo(empresa_c2, tipo="Impresora")

    response = await client.get(URL_EQUIPOS, headers=headers_de(admin))
    assert response.status_code == status.HTTP_200_OK, response.text
    # Ordenados por tipo
    assert [e["id"] for e in response.json()] == [str(e2.id), str(e1.id)]


async def test_listar_equipos_cliente_filtra_por_empresa(
    client: AsyncClient, headers_de, cliente_c1, empresa_c1, empresa_c2, crear_equipo
):
    propio = crear_equipo(empresa_c1)
    crear_equipo(empresa_c2)

    response = await client.get(URL_EQUIPOS, headers=headers_de(cliente_c1))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [e["id"] for e in data] == [str(propio.id)]
    assert data[0]["empresa"]["nombre"] == empresa_c1.nombre

    # Pedir otra empresa solo estrecha el resultado, nunca lo amplía
    response = await client.get(URL_EQUIPOS, headers=headers_de(cliente_c1), params={"empresa_id": str(empresa_c2.id)})
    assert response.json() == []


async def test_listar_equipos_filtro_estado(client: AsyncClient, headers_de, admin, empresa_c1, crear_equipo):
    baja = crear_equipo(empresa_c1, estado="DADO_DE_BAJA")
    crear_equipo(empresa_c1, estado="ACTIVO")

    response = await client.get(URL_EQUIPOS, headers=headers_de(admin), params={"estado": "DADO_DE_BAJA"})
    assert [e["id"] for e in response.json()] == [str(baja.id)]


async def test_listar_equipos_tecnico_solo_asignados(
    client: AsyncClient, headers_de, tecnico_1, empresa_c1, empresa_c2, crear_equipo, crear_mantenimiento, ahora
):
    asignado = crear_equipo(empresa_c2)
    crear_equipo(empresa_c1)
    crear_mantenimiento(asignado, tecnico_1, ahora, estado="COMPLETADO")

    response = await client.get(URL_EQUIPOS, headers=headers_de(tecnico_1))
    assert [e["id"] for e in response.json()] == [str(asignado.id)]


async def test_obtener_equipo_visible(client: AsyncClient, headers_de, cliente_c1, empresa_c1, crear_equipo):
    equipo = crear_equipo(empresa_c1)

    response = await client.get(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(cliente_c1))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["serial"] == equipo.serial


async def test_obtener_equipo_invisible_responde_404(
    client: AsyncClient, headers_de, cliente_c1, tecnico_2, empresa_c2, crear_equipo
):
    ajeno = crear_equipo(empresa_c2)

    for usuario in (cliente_c1, tecnico_2):
        response = await client.get(f"{URL_EQUIPOS}{ajeno.id}", headers=headers_de(usuario))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == f"Equipo con ID {ajeno.id} no encontrado."


async def test_obtener_equipo_inexistente(client: AsyncClient, headers_de, admin):
    response = await client.get(f"{URL_EQUIPOS}{uuid4()}", headers=headers_de(admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_listar_equipos_sin_token(client: AsyncClient):
    response = await client.get(URL_EQUIPOS)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# --- Escritura ---

async def test_dar_de_baja_genera_alerta_critica(
    client: AsyncClient, headers_de, admin, empresa_c1, crear_equipo
):
    equipo = crear_equipo(empresa_c1, tipo="Servidor", marca="HP")
    alertas = await client.get(f"{settings.API_V1_STR}/alertas/", headers=headers_de(admin))
    assert alertas.json()["alertas"] == []

    response = await client.put(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(admin), json={"estado": "DADO_DE_BAJA"})
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["estado"] == "DADO_DE_BAJA"

    alertas = await client.get(f"{settings.API_V1_STR}/alertas/", headers=headers_de(admin))
    data = alertas.json()
    assert len(data["alertas"]) == 1
    alerta = data["alertas"][0]
    assert alerta["id"] == f"critico-{equipo.id}"
    assert alerta["tipo"] == "CRITICO"
    assert alerta["prioridad"] == "ALTA"
    assert alerta["mensaje"] == "El equipo Servidor (HP) está en estado: Dado de Baja"


async def test_reactivar_equipo_retira_la_alerta(client: AsyncClient, headers_de, cliente_c1, empresa_c1, crear_equipo):
    equipo = crear_equipo(empresa_c1, estado="EN_MANTENIMIENTO")

    response = await client.put(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(cliente_c1), json={"estado": "ACTIVO", "ubicacion": "Piso 3"})
    assert response.status_code == status.HTTP_200_OK, response.text
    assert response.json()["ubicacion"] == "Piso 3"

    alertas = await client.get(f"{settings.API_V1_STR}/alertas/", headers=headers_de(cliente_c1))
    assert alertas.json()["contadores"]["criticos"] == 0


async def test_cliente_no_actualiza_equipo_ajeno(client: AsyncClient, headers_de, cliente_c1, empresa_c2, crear_equipo):
    ajeno = crear_equipo(empresa_c2)
    response = await client.put(f"{URL_EQUIPOS}{ajeno.id}", headers=headers_de(cliente_c1), json={"estado": "DADO_DE_BAJA"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_cliente_no_mueve_equipo_de_empresa(
    client: AsyncClient, headers_de, cliente_c1, empresa_c1, empresa_c2, crear_equipo
):
    equipo = crear_equipo(empresa_c1)
    response = await client.put(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(cliente_c1), json={"empresa_id": str(empresa_c2.id), "marca": "Lenovo"})
    assert response.status_code == status.HTTP_200_OK, response.text
    data = response.json()
    assert data["empresa_id"] == str(empresa_c1.id)
    assert data["marca"] == "Lenovo"


async def test_tecnico_no_actualiza_equipos(
    client: AsyncClient, headers_de, tecnico_1, empresa_c1, crear_equipo, crear_mantenimiento, ahora
):
    equipo = crear_equipo(empresa_c1)
    crear_mantenimiento(equipo, tecnico_1, ahora)
    response = await client.put(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(tecnico_1), json={"estado": "INACTIVO"})
    assert response.status_code == status.HTTP_403_FORBIDDEN


async def test_actualizar_con_serial_duplicado_409(client: AsyncClient, headers_de, admin, empresa_c1, crear_equipo):
    equipo = crear_equipo(empresa_c1)
    otro = crear_equipo(empresa_c1)
    response = await client.put(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(admin), json={"serial": otro.serial})
    assert response.status_code == status.HTTP_409_CONFLICT


async def test_cliente_registra_equipo_en_su_empresa(client: AsyncClient, headers_de, cliente_c1, empresa_c1, empresa_c2):
    payload = {"empresa_id": str(empresa_c2.id), "tipo": "Impresora", "marca": "Epson", "serial": "IMP-0001"}
    response = await client.post(URL_EQUIPOS, headers=headers_de(cliente_c1), json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    data = response.json()
    assert data["empresa_id"] == str(empresa_c1.id)
    assert data["estado"] == "ACTIVO"


async def test_registrar_equipo_serial_duplicado_409(client: AsyncClient, headers_de, admin, empresa_c1, crear_equipo):
    existente = crear_equipo(empresa_c1)
    payload = {"empresa_id": str(empresa_c1.id), "tipo": "Laptop", "marca": "Dell", "serial": existente.serial}
    response = await client.post(URL_EQUIPOS, headers=headers_de(admin), json=payload)
    assert response.status_code == status.HTTP_409_CONFLICT


async def test_tecnico_no_registra_equipos(client: AsyncClient, headers_de, tecnico_1, empresa_c1):
    payload = {"empresa_id": str(empresa_c1.id), "tipo": "Laptop", "marca": "Dell", "serial": "LPT-0001"}
    response = await client.post(URL_EQUIPOS, headers=headers_de(tecnico_1), json=payload)
    assert response.status_code == status.HTTP_403_FORBIDDEN


async def test_eliminar_equipo_sin_registros(client: AsyncClient, headers_de, admin, empresa_c1, crear_equipo):
    equipo = crear_equipo(empresa_c1)
    response = await client.delete(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(admin))
    assert response.status_code == status.HTTP_200_OK, response.text
    assert equipo.serial in response.json()["msg"]

    response = await client.get(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_eliminar_equipo_con_mantenimientos_409(
    client: AsyncClient, headers_de, admin, tecnico_1, empresa_c1, crear_equipo, crear_mantenimiento, ahora
):
    equipo = crear_equipo(empresa_c1)
    crear_mantenimiento(equipo, tecnico_1, ahora)
    response = await client.delete(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(admin))
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "1 mantenimientos" in response.json()["detail"]


async def test_cliente_no_elimina_equipos(client: AsyncClient, headers_de, cliente_c1, empresa_c1, crear_equipo):
    equipo = crear_equipo(empresa_c1)
    response = await client.delete(f"{URL_EQUIPOS}{equipo.id}", headers=headers_de(cliente_c1))
    assert response.status_code == status.HTTP_403_FORBIDDEN
