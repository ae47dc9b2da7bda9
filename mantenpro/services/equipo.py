import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func as sql_func, select
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from mantenpro.core.permissions import ADMIN_ROLE_NAME, CLIENTE_ROLE_NAME
from mantenpro.models.equipo import Equipo
from mantenpro.models.historial import Historial
from mantenpro.models.mantenimiento import Mantenimiento
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.enums import TipoRegistroEnum
from mantenpro.schemas.equipo import EquipoCreate, EquipoUpdate

from .base_service import BaseService
from .clasificador import ESTADOS_CRITICOS
from .empresa import empresa_service

logger = logging.getLogger(__name__)


class EquipoService(BaseService[Equipo, EquipoCreate]):
    """
    Servicio para gestionar Equipos.
    Todas las lecturas pasan por el filtro de visibilidad del actor.
    Las escrituras NO realizan commit.
    """

    def get_multi_with_filters(
        self,
        db: Session,
        actor: Actor,
        *,
        skip: int = 0,
        limit: int = 100,
        empresa_id: Optional[UUID] = None,
        estado: Optional[str] = None,
    ) -> List[Equipo]:
        """Lista equipos visibles aplicando filtros opcionales, ordenados por tipo y serial."""
        statement = self.select_visible(actor)

        if empresa_id:
            statement = statement.where(Equipo.empresa_id == empresa_id)
        if estado:
            statement = statement.where(Equipo.estado == estado)

        statement = statement.order_by(Equipo.tipo, Equipo.serial).offset(skip).limit(limit)
        logger.debug(f"Listando equipos para actor {actor.user_id} ({actor.rol}) con empresa_id={empresa_id}, estado={estado}.")
        return list(db.execute(statement).scalars().all())

    def get_criticos(self, db: Session, actor: Actor) -> List[Equipo]:
        """Equipos visibles en un estado que genera alerta CRITICO."""
        statement = self.select_visible(actor).where(Equipo.estado.in_(list(ESTADOS_CRITICOS)))
        result = db.execute(statement)
        return list(result.scalars().all())

    def get_by_serial(self, db: Session, *, serial: str) -> Optional[Equipo]:
        statement = select(Equipo).where(Equipo.serial == serial)
        return db.execute(statement).scalar_one_or_none()

    def _validar_empresa(self, db: Session, empresa_id: UUID) -> None:
        if not empresa_service.get(db, empresa_id):
            logger.error(f"Empresa con ID {empresa_id} no encontrada para el equipo.")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Empresa con ID {empresa_id} no encontrada.")

    def _validar_serial(self, db: Session, serial: str) -> None:
        if self.get_by_serial(db, serial=serial):
            logger.warning(f"Intento de registrar equipo con serial duplicado: {serial}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Ya existe un equipo con serial '{serial}'.")

    def create(self, db: Session, *, obj_in: EquipoCreate, actor: Optional[Actor] = None) -> Equipo:
        """
        Registra un equipo validando la empresa y la unicidad del serial.
        Un CLIENTE solo registra equipos de su propia empresa: `empresa_id` se reemplaza.
        Sin `actor` (herramientas de administración) se usa la empresa indicada.
        NO realiza db.commit().
        """
        if actor is not None and actor.rol == CLIENTE_ROLE_NAME:
            if actor.empresa_id is None:
                logger.warning(f"Cliente {actor.user_id} sin empresa intentó registrar un equipo.")
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="El usuario no tiene una empresa asociada.")
            obj_in = obj_in.model_copy(update={"empresa_id": actor.empresa_id})
        self._validar_empresa(db, obj_in.empresa_id)
        self._validar_serial(db, obj_in.serial)
        return super().create(db, obj_in=obj_in)

    def update(self, db: Session, *, db_obj: Equipo, obj_in: EquipoUpdate, actor: Actor) -> Equipo:
        """
        Actualiza un equipo ya verificado como visible para el actor.
        Solo ADMIN puede moverlo de empresa. Cambiar el estado a EN_MANTENIMIENTO o
        DADO_DE_BAJA lo hace aparecer como alerta CRITICO.
        NO realiza db.commit().
        """
        datos: Dict[str, Any] = obj_in.model_dump(exclude_unset=True)
        # Campos obligatorios en el modelo: un null explícito no se aplica
        for campo in ("empresa_id", "tipo", "marca", "serial", "estado"):
            if campo in datos and datos[campo] is None:
                datos.pop(campo)

        if "empresa_id" in datos and actor.rol != ADMIN_ROLE_NAME:
            logger.info(f"Cambio de empresa ignorado para actor {actor.user_id} con rol {actor.rol}.")
            datos.pop("empresa_id")
        if "empresa_id" in datos and datos["empresa_id"] != db_obj.empresa_id:
            self._validar_empresa(db, datos["empresa_id"])
        if "serial" in datos and datos["serial"] != db_obj.serial:
            self._validar_serial(db, datos["serial"])

        if "estado" in datos and datos["estado"] != db_obj.estado:
            logger.info(f"Equipo ID {db_obj.id}: estado {db_obj.estado} -> {datos['estado']} por actor {actor.user_id}.")
        return super().update(db, db_obj=db_obj, obj_in=datos)

    def remove(self, db: Session, *, db_obj: Equipo) -> Equipo:
        """
        Elimina un equipo sin mantenimientos ni historial asociados.
        NO realiza db.commit().
        """
        mantenimientos = db.execute(
            select(sql_func.count(Mantenimiento.id)).where(Mantenimiento.equipo_id == db_obj.id)
        ).scalar_one()
        historial = db.execute(
            select(sql_func.count(Historial.id)).where(Historial.equipo_id == db_obj.id)
        ).scalar_one()
        if mantenimientos or historial:
            logger.warning(f"Equipo ID {db_obj.id} no eliminado: {mantenimientos} mantenimientos, {historial} entradas de historial.")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"No se puede eliminar el equipo '{db_obj.serial}': tiene {mantenimientos} mantenimientos y {historial} entradas de historial asociadas.",
            )
        return super().remove(db, db_obj=db_obj)


equipo_service = EquipoService(Equipo, TipoRegistroEnum.EQUIPO)
