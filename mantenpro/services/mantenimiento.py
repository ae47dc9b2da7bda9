import logging
from typing import Any, Dict, List, Optional, Union
from uuid import UUID
from datetime import datetime

from sqlalchemy.orm import Session
from sqlalchemy import or_
from fastapi import HTTPException, status

from mantenpro.core.permissions import ADMIN_ROLE_NAME, TECNICO_ROLE_NAME
from mantenpro.models.equipo import Equipo
from mantenpro.models.mantenimiento import Mantenimiento
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.enums import EstadoMantenimientoEnum, TipoRegistroEnum
from mantenpro.schemas.mantenimiento import MantenimientoCambioEstado, MantenimientoCreate, MantenimientoUpdate

from .base_service import BaseService
from .clasificador import ESTADOS_ACTIVOS
from .equipo import equipo_service
from .historial import historial_service
from .usuario import usuario_service

logger = logging.getLogger(__name__)


class MantenimientoService(BaseService[Mantenimiento, MantenimientoCreate]):
    """
    Servicio para gestionar los registros de Mantenimiento.
    Las lecturas pasan por el filtro de visibilidad del actor.
    Las escrituras NO realizan commit; el commit se maneja en la capa de la ruta.
    """

    def get_multi_with_filters(
        self,
        db: Session,
        actor: Actor,
        *,
        skip: int = 0,
        limit: int = 100,
        estado: Optional[str] = None,
        tipo: Optional[str] = None,
        tecnico_id: Optional[UUID] = None,
        equipo_id: Optional[UUID] = None,
        empresa_id: Optional[UUID] = None,
        search: Optional[str] = None,
    ) -> List[Mantenimiento]:
        """
        Obtiene mantenimientos visibles aplicando filtros dinámicos.
        `search` admite varios términos separados por espacios; cada término debe
        aparecer en el tipo, marca, modelo o serial del equipo, o en la descripción.
        """
        statement = self.select_visible(actor)

        if estado:
            statement = statement.where(Mantenimiento.estado == estado)
        if tipo:
            statement = statement.where(Mantenimiento.tipo == tipo)
        if tecnico_id:
            statement = statement.where(Mantenimiento.tecnico_id == tecnico_id)
        if equipo_id:
            statement = statement.where(Mantenimiento.equipo_id == equipo_id)

        terminos = search.split() if search else []
        filtrar_empresa = empresa_id is not None and actor.rol == ADMIN_ROLE_NAME
        if empresa_id is not None and not filtrar_empresa:
            logger.info(f"Filtro empresa_id ignorado para actor {actor.user_id} con rol {actor.rol}.")

        if terminos or filtrar_empresa:
            statement = statement.join(Mantenimiento.equipo)
        if filtrar_empresa:
            statement = statement.where(Equipo.empresa_id == empresa_id)
        for termino in terminos:
            patron = f"%{termino}%"
            statement = statement.where(
                or_(
                    Equipo.tipo.ilike(patron),
                    Equipo.marca.ilike(patron),
                    Equipo.modelo.ilike(patron),
                    Equipo.serial.ilike(patron),
                    Mantenimiento.descripcion.ilike(patron),
                )
            )

        statement = statement.order_by(Mantenimiento.fecha_programada.desc(), Mantenimiento.created_at.desc())
        statement = statement.offset(skip).limit(limit)
        logger.debug(f"Listando mantenimientos para actor {actor.user_id} ({actor.rol}); estado={estado}, tipo={tipo}, search={search!r}.")
        result = db.execute(statement)
        return list(result.scalars().all())

    def get_activos(self, db: Session, actor: Actor) -> List[Mantenimiento]:
        """Mantenimientos visibles en estado PROGRAMADO o EN_PROCESO."""
        statement = self.select_visible(actor).where(Mantenimiento.estado.in_(list(ESTADOS_ACTIVOS)))
        result = db.execute(statement)
        return list(result.scalars().all())

    def get_proximos(self, db: Session, actor: Actor, *, limit: int = 10) -> List[Mantenimiento]:
        """Los próximos mantenimientos activos visibles, por fecha programada ascendente."""
        statement = (
            self.select_visible(actor)
            .where(
                Mantenimiento.estado.in_(list(ESTADOS_ACTIVOS)),
                Mantenimiento.fecha_programada.is_not(None),
            )
            .order_by(Mantenimiento.fecha_programada.asc())
            .limit(limit)
        )
        result = db.execute(statement)
        return list(result.scalars().all())

    def create(self, db: Session, *, obj_in: MantenimientoCreate, actor: Actor, ahora: datetime) -> Mantenimiento:
        """
        Programa un mantenimiento y registra la entrada de historial correspondiente.
        El equipo debe ser visible para el actor y el técnico debe tener rol TECNICO.
        NO realiza db.commit().
        """
        logger.debug(f"Intentando crear mantenimiento para Equipo ID: {obj_in.equipo_id} por actor {actor.user_id}.")

        equipo = equipo_service.get_visible(db, actor, obj_in.equipo_id)
        if not equipo:
            logger.error(f"Equipo con ID {obj_in.equipo_id} no encontrado o no visible al crear mantenimiento.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Equipo con ID {obj_in.equipo_id} no encontrado.")

        usuario_service.get_tecnico_or_error(db, obj_in.tecnico_id)

        db_mantenimiento = super().create(db, obj_in=obj_in)
        db.flush()

        historial_service.registrar(
            db,
            equipo_id=obj_in.equipo_id,
            tecnico_id=obj_in.tecnico_id,
            mantenimiento_id=db_mantenimiento.id,
            observaciones=f"Mantenimiento {str(obj_in.tipo).lower()} programado: {obj_in.descripcion}",
            fecha=ahora,
        )
        logger.info(f"Mantenimiento {obj_in.tipo} para equipo '{equipo.serial}' preparado para ser creado.")
        return db_mantenimiento

    def actualizar(
        self,
        db: Session,
        *,
        db_obj: Mantenimiento,
        obj_in: Union[MantenimientoUpdate, MantenimientoCambioEstado],
        actor: Actor,
        ahora: datetime,
    ) -> Mantenimiento:
        """
        Actualiza un mantenimiento ya verificado como visible: reprogramación,
        tipo, descripción, observaciones y estado.
        Un técnico solo puede actualizar sus propios mantenimientos.
        Completar sin `fecha_realizada` registra la fecha actual, y todo cambio de
        estado deja una entrada de historial a nombre del actor.
        NO realiza db.commit().
        """
        if actor.rol == TECNICO_ROLE_NAME and db_obj.tecnico_id != actor.user_id:
            logger.warning(f"Técnico {actor.user_id} intentó actualizar el mantenimiento ajeno {db_obj.id}.")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Solo puede actualizar sus propios mantenimientos.")

        datos: Dict[str, Any] = obj_in.model_dump(exclude_unset=True)
        # Un null explícito no borra campos obligatorios ni la fecha de realización
        for campo in ("tipo", "descripcion", "fecha_programada", "fecha_realizada", "estado"):
            if campo in datos and datos[campo] is None:
                datos.pop(campo)

        estado_anterior = db_obj.estado
        nuevo_estado = datos.get("estado")
        if nuevo_estado == EstadoMantenimientoEnum.COMPLETADO and "fecha_realizada" not in datos:
            datos["fecha_realizada"] = ahora
        if "fecha_programada" in datos:
            logger.info(f"Mantenimiento ID {db_obj.id} reprogramado de {db_obj.fecha_programada} a {datos['fecha_programada']} por actor {actor.user_id}.")

        self.update(db, db_obj=db_obj, obj_in=datos)

        if nuevo_estado is not None and nuevo_estado != estado_anterior:
            observaciones = datos.get("observaciones")
            sufijo = f". {observaciones}" if observaciones else ""
            historial_service.registrar(
                db,
                equipo_id=db_obj.equipo_id,
                tecnico_id=actor.user_id,
                mantenimiento_id=db_obj.id,
                observaciones=f"Estado cambiado a: {nuevo_estado}{sufijo}",
                fecha=ahora,
            )
            logger.info(f"Mantenimiento ID {db_obj.id}: estado {estado_anterior} -> {nuevo_estado} por actor {actor.user_id}.")
        elif nuevo_estado is not None:
            logger.info(f"Mantenimiento ID {db_obj.id}: estado sin cambios ({estado_anterior}).")
        return db_obj


mantenimiento_service = MantenimientoService(Mantenimiento, TipoRegistroEnum.MANTENIMIENTO)
