import logging
import traceback

from fastapi import FastAPI, Request, status, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from psycopg import errors as psycopg_errors
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, NoResultFound

from mantenpro.core.exceptions import MantenProError

logger = logging.getLogger(__name__)

# Índices únicos con mensaje propio (nombres según la convención de db/base.py)
MENSAJES_UNICIDAD = {
    "ix_usuarios_email": "Correo electrónico ya registrado.",
    "ix_equipos_serial": "Número de serie ya registrado.",
    "ix_empresas_nit": "Ya existe una empresa con ese NIT.",
}


async def validation_exception_handler(request: Request, exc: Exception):
    """
    Manejador para errores de validación de Pydantic en las solicitudes.
    """
    if not isinstance(exc, RequestValidationError):
        return await generic_exception_handler(request, exc)

    error_details = []
    for error in exc.errors():
        field_loc = error.get("loc", ["body"])
        if field_loc and field_loc[0] == 'body' and len(field_loc) > 1:
            field = " -> ".join(map(str, field_loc[1:]))
        else:
            field = " -> ".join(map(str, field_loc)) or "body"
        message = error.get("msg", "Error de validación")
        error_details.append({"field": field, "message": message})
    logger.warning(f"Error de Validación en Request: {request.method} {request.url} - Errores: {error_details}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={"detail": "Error de validación en los datos de entrada.", "errors": error_details},
    )

async def http_exception_handler(request: Request, exc: Exception):
    """
    Manejador para excepciones HTTP explícitas lanzadas en la aplicación.
    """
    if not isinstance(exc, HTTPException):
        return await generic_exception_handler(request, exc)

    log_message = f"HTTPException - Status: {exc.status_code}, Detail: {exc.detail}, Request: {request.method} {request.url}"
    if exc.status_code >= 500:
        logger.error(log_message, exc_info=False)
    elif exc.status_code >= 400:
        logger.warning(log_message)
    else:
        logger.info(log_message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )

async def domain_exception_handler(request: Request, exc: Exception):
    """
    Manejador para errores de negocio (`MantenProError`) que llegan hasta la ruta.
    """
    if not isinstance(exc, MantenProError):
        return await generic_exception_handler(request, exc)

    logger.warning(f"Error de negocio ({type(exc).__name__}) registro={exc.registro_id}: {exc.message}. Request: {request.method} {request.url}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content={"detail": exc.message},
    )

async def database_exception_handler(request: Request, exc: Exception):
    """
    Manejador para errores relacionados con la base de datos (SQLAlchemy y psycopg).
    """
    if not isinstance(exc, SQLAlchemyError):
        return await generic_exception_handler(request, exc)

    original_exc = getattr(exc, 'orig', None)
    diag_obj = getattr(original_exc, 'diag', None)
    constraint_name = getattr(diag_obj, 'constraint_name', None) if diag_obj else None
    error_message = str(original_exc if original_exc else exc).lower()

    logger.error(
        f"Database Error Handler - Type: {type(original_exc).__name__ if original_exc else type(exc).__name__}, "
        f"Constraint: '{constraint_name}', Msg: '{error_message}', Request: {request.method} {request.url}",
        exc_info=True
    )

    if isinstance(exc, IntegrityError):
        if isinstance(original_exc, psycopg_errors.UniqueViolation) or "unique constraint" in error_message:
            user_message = MENSAJES_UNICIDAD.get(
                constraint_name or "",
                f"Conflicto: Ya existe un registro con datos que deben ser únicos (restricción: {constraint_name or 'desconocida'})."
            )
        elif isinstance(original_exc, psycopg_errors.ForeignKeyViolation) or "foreign key constraint" in error_message:
            user_message = f"Error de referencia: El registro vinculado no existe (restricción: {constraint_name or 'desconocida'})."
        else:
            user_message = "Error de integridad en la base de datos. Verifique los datos."
        logger.info(f"DB Handler: Mapeando IntegrityError -> 409, Detail='{user_message}'")
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": user_message})

    if isinstance(exc, NoResultFound):
        logger.warning(f"DB Handler: Recurso no encontrado (NoResultFound): {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "El recurso solicitado no fue encontrado."},
        )

    logger.error(f"DB Handler: Error DB no mapeado resultando en 500. Exception: {type(exc).__name__} - {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Ocurrió un error interno del servidor al procesar la solicitud de base de datos."},
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Manejador genérico para cualquier excepción no capturada por otros manejadores.
    """
    log_message = f"Unhandled Python Exception: {type(exc).__name__} - {exc}, Request: {request.method} {request.url}\n{traceback.format_exc()}"
    logger.critical(log_message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Ocurrió un error interno inesperado en la aplicación."},
    )

def register_error_handlers(app: FastAPI):
    """Registra todos los manejadores de excepciones personalizados en la app FastAPI."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(MantenProError, domain_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Manejadores de errores personalizados registrados.")
