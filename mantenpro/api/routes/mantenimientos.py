import logging
from typing import Any, List, Optional
from uuid import UUID as PyUUID
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status, Query, Body
from sqlalchemy.orm import Session

from mantenpro.api import deps
from mantenpro.core import permissions as perms
from mantenpro.models.mantenimiento import Mantenimiento as MantenimientoModel
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.common import Msg
from mantenpro.schemas.enums import EstadoMantenimientoEnum, TipoMantenimientoEnum
from mantenpro.schemas.mantenimiento import Mantenimiento, MantenimientoCreate, MantenimientoCambioEstado, MantenimientoUpdate
from mantenpro.services.clasificador import evaluar_fila
from mantenpro.services.mantenimiento import mantenimiento_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _con_alerta(mantenimiento: MantenimientoModel, ahora: datetime) -> Mantenimiento:
    """Serializa la fila con su resaltado, calculado por el mismo clasificador que /alertas."""
    fila = Mantenimiento.model_validate(mantenimiento)
    fila.alerta = evaluar_fila(mantenimiento, ahora)
    return fila


@router.post("/",
             response_model=Mantenimiento,
             status_code=status.HTTP_201_CREATED,
             summary="Programar un Nuevo Mantenimiento",
             )
def create_mantenimiento(
    *,
    db: Session = Depends(deps.get_db),
    mantenimiento_in: MantenimientoCreate,
    actor: Actor = Depends(deps.RoleChecker(perms.ROLES_PROGRAMAR_MANTENIMIENTOS)),
    ahora: datetime = Depends(deps.get_ahora),
) -> Any:
    """
    Programa un nuevo mantenimiento para un equipo visible y registra la entrada de historial.
    Roles permitidos: ADMIN y CLIENTE.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) intentando crear mantenimiento para equipo ID: {mantenimiento_in.equipo_id}.")
    try:
        mantenimiento = mantenimiento_service.create(db, obj_in=mantenimiento_in, actor=actor, ahora=ahora)
        db.commit()
        db.refresh(mantenimiento)
        logger.info(f"Mantenimiento ID {mantenimiento.id} para equipo ID {mantenimiento.equipo_id} creado exitosamente por {actor.user_id}.")
        return _con_alerta(mantenimiento, ahora)
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al crear mantenimiento para equipo ID {mantenimiento_in.equipo_id}: {http_exc.detail}")
        raise http_exc
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado creando mantenimiento para equipo ID {mantenimiento_in.equipo_id}: {e}", exc_info=True)
        raise


@router.get("/",
            response_model=List[Mantenimiento],
            summary="Listar Mantenimientos",
            )
def read_mantenimientos(
    db: Session = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    estado: Optional[EstadoMantenimientoEnum] = Query(None, description="Filtrar por estado del mantenimiento"),
    tipo: Optional[TipoMantenimientoEnum] = Query(None, description="Filtrar por tipo de mantenimiento"),
    tecnico_id: Optional[PyUUID] = Query(None, description="Filtrar por técnico asignado"),
    equipo_id: Optional[PyUUID] = Query(None, description="Filtrar por ID de equipo"),
    empresa_id: Optional[PyUUID] = Query(None, description="Filtrar por empresa (solo ADMIN)"),
    search: Optional[str] = Query(None, max_length=200, description="Términos separados por espacios"),
    actor: Actor = Depends(deps.get_current_actor),
    ahora: datetime = Depends(deps.get_ahora),
) -> Any:
    """
    Obtiene los mantenimientos visibles para el actor, con filtros opcionales.
    Cada fila incluye `alerta` (ATRASADO / PROXIMO y días) o null.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) listando mantenimientos.")
    mantenimientos = mantenimiento_service.get_multi_with_filters(
        db,
        actor,
        skip=skip,
        limit=limit,
        estado=estado.value if estado else None,
        tipo=tipo.value if tipo else None,
        tecnico_id=tecnico_id,
        equipo_id=equipo_id,
        empresa_id=empresa_id,
        search=search,
    )
    return [_con_alerta(m, ahora) for m in mantenimientos]


@router.get("/{mantenimiento_id}",
            response_model=Mantenimiento,
            summary="Obtener Mantenimiento por ID",
            )
def read_mantenimiento_by_id(
    mantenimiento_id: PyUUID,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
    ahora: datetime = Depends(deps.get_ahora),
) -> Any:
    """
    Obtiene los detalles de un mantenimiento. Si no es visible para el actor responde 404.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) solicitando mantenimiento ID: {mantenimiento_id}.")
    mantenimiento = mantenimiento_service.get_visible_or_404(db, actor, mantenimiento_id)
    return _con_alerta(mantenimiento, ahora)


@router.patch("/{mantenimiento_id}/estado",
              response_model=Mantenimiento,
              summary="Cambiar el estado de un Mantenimiento",
              )
def cambiar_estado_mantenimiento(
    *,
    db: Session = Depends(deps.get_db),
    mantenimiento_id: PyUUID,
    cambio_in: MantenimientoCambioEstado = Body(...),
    actor: Actor = Depends(deps.RoleChecker(perms.ROLES_EDITAR_MANTENIMIENTOS)),
    ahora: datetime = Depends(deps.get_ahora),
) -> Any:
    """
    Cambia el estado de un mantenimiento visible para el actor.
    Un técnico solo puede cambiar los suyos. Completar sin fecha registra la fecha actual.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) cambiando estado del mantenimiento ID {mantenimiento_id} a {cambio_in.estado}.")
    db_mantenimiento = mantenimiento_service.get_visible_or_404(db, actor, mantenimiento_id)
    try:
        mantenimiento = mantenimiento_service.actualizar(
            db, db_obj=db_mantenimiento, obj_in=cambio_in, actor=actor, ahora=ahora
        )
        db.commit()
        db.refresh(mantenimiento)
        return _con_alerta(mantenimiento, ahora)
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al cambiar estado del mantenimiento ID {mantenimiento_id}: {http_exc.detail}")
        raise http_exc
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado cambiando estado del mantenimiento ID {mantenimiento_id}: {e}", exc_info=True)
        raise


@router.put("/{mantenimiento_id}",
            response_model=Mantenimiento,
            summary="Actualizar un Mantenimiento",
            )
def update_mantenimiento(
    *,
    db: Session = Depends(deps.get_db),
    mantenimiento_id: PyUUID,
    mantenimiento_in: MantenimientoUpdate,
    actor: Actor = Depends(deps.RoleChecker(perms.ROLES_EDITAR_MANTENIMIENTOS)),
    ahora: datetime = Depends(deps.get_ahora),
) -> Any:
    """
    Actualiza un mantenimiento visible: tipo, descripción, fechas, observaciones o estado.
    Reprogramar `fecha_programada` recalcula su alerta ATRASADO / PROXIMO.
    Un técnico solo puede actualizar los suyos; un cliente, los de su empresa.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) actualizando mantenimiento ID {mantenimiento_id} con datos: {mantenimiento_in.model_dump(exclude_unset=True)}")
    db_mantenimiento = mantenimiento_service.get_visible_or_404(db, actor, mantenimiento_id)
    try:
        mantenimiento = mantenimiento_service.actualizar(
            db, db_obj=db_mantenimiento, obj_in=mantenimiento_in, actor=actor, ahora=ahora
        )
        db.commit()
        db.refresh(mantenimiento)
        logger.info(f"Mantenimiento ID {mantenimiento_id} actualizado exitosamente por {actor.user_id}.")
        return _con_alerta(mantenimiento, ahora)
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al actualizar mantenimiento ID {mantenimiento_id}: {http_exc.detail}")
        raise http_exc
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando mantenimiento ID {mantenimiento_id}: {e}", exc_info=True)
        raise


@router.delete("/{mantenimiento_id}",
               response_model=Msg,
               status_code=status.HTTP_200_OK,
               summary="Eliminar un Mantenimiento",
               )
def delete_mantenimiento(
    *,
    db: Session = Depends(deps.get_db),
    mantenimiento_id: PyUUID,
    actor: Actor = Depends(deps.RoleChecker(perms.ROLES_ELIMINAR_MANTENIMIENTOS)),
) -> Any:
    """
    Elimina un mantenimiento junto con sus entradas de historial.
    Rol permitido: ADMIN.
    """
    logger.warning(f"Actor {actor.user_id} ({actor.rol}) intentando eliminar mantenimiento ID: {mantenimiento_id}.")
    db_mantenimiento = mantenimiento_service.get_visible_or_404(db, actor, mantenimiento_id)
    try:
        mantenimiento_service.remove(db, db_obj=db_mantenimiento)
        db.commit()
        logger.info(f"Mantenimiento ID {mantenimiento_id} eliminado exitosamente por {actor.user_id}.")
        return {"msg": f"Mantenimiento {mantenimiento_id} eliminado correctamente."}
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al eliminar mantenimiento ID {mantenimiento_id}: {e}", exc_info=True)
        raise
