# =================================================================
# Roles del Sistema
# =================================================================
# Valores del claim 'rol' que entrega el proveedor de identidad.
# Cualquier otro valor se trata como "sin acceso".
# =================================================================

ADMIN_ROLE_NAME = "ADMIN"
TECNICO_ROLE_NAME = "TECNICO"
CLIENTE_ROLE_NAME = "CLIENTE"

ROLES_SISTEMA = frozenset({ADMIN_ROLE_NAME, TECNICO_ROLE_NAME, CLIENTE_ROLE_NAME})

# --- Roles por operación ---
ROLES_PROGRAMAR_MANTENIMIENTOS = {ADMIN_ROLE_NAME, CLIENTE_ROLE_NAME}
ROLES_EDITAR_MANTENIMIENTOS = {ADMIN_ROLE_NAME, TECNICO_ROLE_NAME, CLIENTE_ROLE_NAME}
ROLES_ELIMINAR_MANTENIMIENTOS = {ADMIN_ROLE_NAME}
ROLES_GESTIONAR_EQUIPOS = {ADMIN_ROLE_NAME, CLIENTE_ROLE_NAME}
ROLES_ELIMINAR_EQUIPOS = {ADMIN_ROLE_NAME}
