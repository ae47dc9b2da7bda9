import logging
from typing import Any, List, Optional
from uuid import UUID as PyUUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from mantenpro.api import deps
from mantenpro.core import permissions as perms
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.common import Msg
from mantenpro.schemas.enums import EstadoEquipoEnum
from mantenpro.schemas.equipo import Equipo, EquipoCreate, EquipoUpdate
from mantenpro.services.equipo import equipo_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/",
             response_model=Equipo,
             status_code=status.HTTP_201_CREATED,
             summary="Registrar un Nuevo Equipo",
             )
def create_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_in: EquipoCreate,
    actor: Actor = Depends(deps.RoleChecker(perms.ROLES_GESTIONAR_EQUIPOS)),
) -> Any:
    """
    Registra un equipo. Un CLIENTE solo puede registrarlo en su propia empresa.
    Roles permitidos: ADMIN y CLIENTE.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) intentando registrar equipo con serial: {equipo_in.serial}.")
    try:
        equipo = equipo_service.create(db, obj_in=equipo_in, actor=actor)
        db.commit()
        db.refresh(equipo)
        logger.info(f"Equipo '{equipo.serial}' (ID: {equipo.id}) registrado exitosamente por {actor.user_id}.")
        return equipo
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al registrar equipo con serial {equipo_in.serial}: {http_exc.detail}")
        raise http_exc
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado registrando equipo con serial {equipo_in.serial}: {e}", exc_info=True)
        raise


@router.get("/",
            response_model=List[Equipo],
            summary="Listar Equipos",
            )
def read_equipos(
    db: Session = Depends(deps.get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    empresa_id: Optional[PyUUID] = Query(None, description="Filtrar por empresa"),
    estado: Optional[EstadoEquipoEnum] = Query(None, description="Filtrar por estado del equipo"),
    actor: Actor = Depends(deps.get_current_actor),
) -> Any:
    """
    Obtiene la lista de equipos visibles para el actor, con filtros opcionales.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) listando equipos.")
    return equipo_service.get_multi_with_filters(
        db,
        actor,
        skip=skip,
        limit=limit,
        empresa_id=empresa_id,
        estado=estado.value if estado else None,
    )


@router.get("/{equipo_id}",
            response_model=Equipo,
            summary="Obtener Equipo por ID",
            )
def read_equipo_by_id(
    equipo_id: PyUUID,
    db: Session = Depends(deps.get_db),
    actor: Actor = Depends(deps.get_current_actor),
) -> Any:
    """
    Obtiene un equipo. Si no existe o no es visible para el actor responde 404.
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) solicitando equipo ID: {equipo_id}.")
    return equipo_service.get_visible_or_404(db, actor, equipo_id)


@router.put("/{equipo_id}",
            response_model=Equipo,
            summary="Actualizar un Equipo",
            )
def update_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_id: PyUUID,
    equipo_in: EquipoUpdate,
    actor: Actor = Depends(deps.RoleChecker(perms.ROLES_GESTIONAR_EQUIPOS)),
) -> Any:
    """
    Actualiza un equipo visible para el actor. Cambiar `estado` a EN_MANTENIMIENTO
    o DADO_DE_BAJA genera la alerta CRITICO correspondiente.
    Roles permitidos: ADMIN y CLIENTE (solo equipos de su empresa).
    """
    logger.info(f"Actor {actor.user_id} ({actor.rol}) actualizando equipo ID {equipo_id} con datos: {equipo_in.model_dump(exclude_unset=True)}")
    db_equipo = equipo_service.get_visible_or_404(db, actor, equipo_id)
    try:
        equipo = equipo_service.update(db, db_obj=db_equipo, obj_in=equipo_in, actor=actor)
        db.commit()
        db.refresh(equipo)
        logger.info(f"Equipo '{equipo.serial}' (ID: {equipo_id}) actualizado exitosamente por {actor.user_id}.")
        return equipo
    except HTTPException as http_exc:
        db.rollback()
        logger.warning(f"Error HTTP al actualizar equipo ID {equipo_id}: {http_exc.detail}")
        raise http_exc
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado actualizando equipo ID {equipo_id}: {e}", exc_info=True)
        raise


@router.delete("/{equipo_id}",
               response_model=Msg,
               status_code=status.HTTP_200_OK,
               summary="Eliminar un Equipo",
               )
def delete_equipo(
    *,
    db: Session = Depends(deps.get_db),
    equipo_id: PyUUID,
    actor: Actor = Depends(deps.RoleChecker(perms.ROLES_ELIMINAR_EQUIPOS)),
) -> Any:
    """
    Elimina un equipo sin mantenimientos ni historial asociados (409 si los tiene).
    Rol permitido: ADMIN.
    """
    logger.warning(f"Actor {actor.user_id} ({actor.rol}) intentando eliminar equipo ID: {equipo_id}.")
    db_equipo = equipo_service.get_visible_or_404(db, actor, equipo_id)
    serial = db_equipo.serial
    try:
        equipo_service.remove(db, db_obj=db_equipo)
        db.commit()
        logger.info(f"Equipo '{serial}' (ID: {equipo_id}) eliminado exitosamente por {actor.user_id}.")
        return {"msg": f"Equipo '{serial}' eliminado correctamente."}
    except HTTPException as http_exc:
        db.rollback()
        raise http_exc
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al eliminar equipo ID {equipo_id}: {e}", exc_info=True)
        raise
