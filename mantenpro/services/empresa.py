import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy import select
from fastapi import HTTPException, status

from mantenpro.models.empresa import Empresa
from mantenpro.schemas.empresa import EmpresaCreate

logger = logging.getLogger(__name__)


class EmpresaService:
    """Empresas cliente. NO realiza commit."""

    def get(self, db: Session, id: UUID) -> Optional[Empresa]:
        return db.get(Empresa, id)

    def get_by_nit(self, db: Session, *, nit: str) -> Optional[Empresa]:
        statement = select(Empresa).where(Empresa.nit == nit)
        return db.execute(statement).scalar_one_or_none()

    def create(self, db: Session, *, obj_in: EmpresaCreate) -> Empresa:
        if self.get_by_nit(db, nit=obj_in.nit):
            logger.warning(f"Intento de crear empresa con NIT duplicado: {obj_in.nit}")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Ya existe una empresa con NIT '{obj_in.nit}'.")
        db_obj = Empresa(**obj_in.model_dump())
        db.add(db_obj)
        logger.info(f"Empresa '{obj_in.nombre}' preparada para ser creada.")
        return db_obj


empresa_service = EmpresaService()
