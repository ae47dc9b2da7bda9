from typing import Any, Optional


class MantenProError(Exception):
    """Error base de la lógica de negocio de MantenPro."""

    def __init__(self, message: str, *, registro_id: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.registro_id = registro_id


class FechaProgramadaFaltanteError(MantenProError):
    """
    Un mantenimiento activo (Programado / En Proceso) no tiene fecha programada.
    Es una violación de integridad de datos en el almacén, no un error del usuario.
    """
