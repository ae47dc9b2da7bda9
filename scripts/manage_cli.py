import sys
import argparse
from datetime import datetime, timedelta, timezone
from os.path import abspath, dirname

root_dir = dirname(dirname(abspath(__file__)))
sys.path.append(root_dir)

from fastapi import HTTPException
from pydantic import ValidationError

from mantenpro.core.security import create_access_token
from mantenpro.db.session import SessionLocal
from mantenpro.schemas.actor import Actor
from mantenpro.schemas.empresa import EmpresaCreate
from mantenpro.schemas.enums import EstadoEquipoEnum, RolUsuarioEnum
from mantenpro.schemas.equipo import EquipoCreate
from mantenpro.schemas.usuario import UsuarioCreate
from mantenpro.services import alerta_service, empresa_service, equipo_service, usuario_service

ROLES_PERMITIDOS = [rol.value for rol in RolUsuarioEnum]
ESTADOS_EQUIPO = [estado.value for estado in EstadoEquipoEnum]

# --- Funciones de Gestión ---

def create_empresa(db, nombre: str, nit: str, contacto: str = None, telefono: str = None, email: str = None):
    """Registra una empresa cliente."""
    print(f"Iniciando creación de la empresa con NIT: {nit}")
    try:
        empresa_in = EmpresaCreate(nombre=nombre, nit=nit, contacto=contacto, telefono=telefono, email=email)
        empresa = empresa_service.create(db, obj_in=empresa_in)
        db.commit()
        print(f"✅ ¡Empresa '{nombre}' creada exitosamente! ID: {empresa.id}")
    except (HTTPException, ValidationError) as e:
        db.rollback()
        print(f"❌ Error: {getattr(e, 'detail', e)}")

def create_user(db, nombre: str, email: str, rol: str, empresa_nit: str = None):
    """Crea un nuevo perfil de usuario. Las credenciales se gestionan en el proveedor de identidad."""
    print(f"Iniciando creación de usuario para el email: {email}")
    empresa_id = None
    if empresa_nit:
        empresa = empresa_service.get_by_nit(db, nit=empresa_nit)
        if not empresa:
            print(f"❌ Error: No existe una empresa con NIT '{empresa_nit}'.")
            return
        empresa_id = empresa.id
        print(f"✔️ Empresa '{empresa.nombre}' encontrada con ID: {empresa.id}")
    try:
        user_in = UsuarioCreate(nombre=nombre, email=email, rol=rol, empresa_id=empresa_id)
        user = usuario_service.create(db, obj_in=user_in)
        db.commit()
        print(f"✅ ¡Usuario '{nombre}' con rol '{rol}' creado exitosamente! ID: {user.id}")
    except (HTTPException, ValidationError) as e:
        db.rollback()
        print(f"❌ Error: {getattr(e, 'detail', e)}")

def create_equipo(db, empresa_nit: str, tipo: str, marca: str, serial: str, modelo: str = None, estado: str = "ACTIVO", ubicacion: str = None):
    """Registra un equipo para la empresa indicada por NIT."""
    print(f"Iniciando registro del equipo con serial: {serial}")
    empresa = empresa_service.get_by_nit(db, nit=empresa_nit)
    if not empresa:
        print(f"❌ Error: No existe una empresa con NIT '{empresa_nit}'.")
        return
    try:
        equipo_in = EquipoCreate(
            empresa_id=empresa.id, tipo=tipo, marca=marca, modelo=modelo,
            serial=serial, estado=estado, ubicacion=ubicacion,
        )
        equipo = equipo_service.create(db, obj_in=equipo_in)
        db.commit()
        print(f"✅ ¡Equipo {tipo} ({marca}) registrado para '{empresa.nombre}'! ID: {equipo.id}")
    except (HTTPException, ValidationError) as e:
        db.rollback()
        print(f"❌ Error: {getattr(e, 'detail', e)}")

def list_users(db):
    """Muestra una lista de todos los usuarios con su rol y empresa."""
    print("\n--- LISTA DE USUARIOS ---")
    all_users = usuario_service.get_multi(db)
    if not all_users:
        print("-> No se encontraron usuarios en la base de datos.")
        return
    print(f"{'ROL':<10} | {'NOMBRE':<25} | {'EMAIL':<30} | {'EMPRESA'}")
    print("-" * 90)
    for user in all_users:
        empresa = user.empresa.nombre if user.empresa else "-"
        print(f"{user.rol:<10} | {user.nombre:<25} | {user.email:<30} | {empresa}")
    print("-" * 90)
    print(f"Total: {len(all_users)} usuarios.")

def _actor_de(db, email: str):
    user = usuario_service.get_by_email(db, email=email)
    if not user:
        print(f"⚠️ No se encontró ningún usuario con el email '{email}'.")
        return None
    return Actor(rol=user.rol, user_id=user.id, empresa_id=user.empresa_id)

def emitir_token(db, email: str, minutos: int):
    """Emite un token de desarrollo con la identidad de un usuario existente."""
    actor = _actor_de(db, email)
    if not actor:
        return
    token = create_access_token(
        actor.user_id, rol=actor.rol, empresa_id=actor.empresa_id, expires_delta=timedelta(minutes=minutos)
    )
    print(f"✔️ Token para {email} ({actor.rol}), válido {minutos} minutos:\n{token}")

def resumen_alertas(db, email: str):
    """Imprime las alertas que vería un usuario en este momento."""
    actor = _actor_de(db, email)
    if not actor:
        return
    respuesta = alerta_service.get_alertas(db, actor, datetime.now(timezone.utc))
    c = respuesta.contadores
    print(f"\n--- ALERTAS DE {email} ({actor.rol}) ---")
    print(f"Atrasados: {c.atrasados} | Próximos: {c.proximos} | Críticos: {c.criticos} | Total: {c.total}")
    print("-" * 90)
    for alerta in respuesta.alertas:
        print(f"[{alerta.prioridad.value:<5}] {alerta.titulo}: {alerta.mensaje}")

# --- Interfaz de Línea de Comandos Principal ---

def main():
    parser = argparse.ArgumentParser(description="Herramienta CLI para gestionar MantenPro.")
    subparsers = parser.add_subparsers(dest="command", help="Comandos disponibles", required=True)

    parser_empresa = subparsers.add_parser("create-empresa", help="Crear una empresa cliente.")
    parser_empresa.add_argument("--nombre", type=str, required=True, help="Razón social.")
    parser_empresa.add_argument("--nit", type=str, required=True, help="NIT único.")
    parser_empresa.add_argument("--contacto", type=str, help="Persona de contacto.")
    parser_empresa.add_argument("--telefono", type=str, help="Teléfono de contacto.")
    parser_empresa.add_argument("--email", type=str, help="Email de contacto.")

    parser_create = subparsers.add_parser("create", help="Crear un nuevo usuario.")
    parser_create.add_argument("--nombre", type=str, required=True, help="Nombre completo.")
    parser_create.add_argument("--email", type=str, required=True, help="Email del usuario.")
    parser_create.add_argument("--rol", type=str, required=True, choices=ROLES_PERMITIDOS, help="Rol del usuario.")
    parser_create.add_argument("--empresa-nit", type=str, help="NIT de la empresa (obligatorio para CLIENTE).")

    parser_equipo = subparsers.add_parser("create-equipo", help="Registrar un equipo de una empresa.")
    parser_equipo.add_argument("--empresa-nit", type=str, required=True, help="NIT de la empresa dueña del equipo.")
    parser_equipo.add_argument("--tipo", type=str, required=True, help="Tipo de equipo (ej: Laptop, Servidor).")
    parser_equipo.add_argument("--marca", type=str, required=True, help="Marca.")
    parser_equipo.add_argument("--serial", type=str, required=True, help="Número de serie único.")
    parser_equipo.add_argument("--modelo", type=str, help="Modelo.")
    parser_equipo.add_argument("--estado", type=str, default="ACTIVO", choices=ESTADOS_EQUIPO, help="Estado inicial.")
    parser_equipo.add_argument("--ubicacion", type=str, help="Ubicación física.")

    subparsers.add_parser("list-users", help="Mostrar una lista de todos los usuarios.")

    parser_token = subparsers.add_parser("token", help="Emitir un token de desarrollo para un usuario.")
    parser_token.add_argument("--email", type=str, required=True, help="Email del usuario.")
    parser_token.add_argument("--minutos", type=int, default=60, help="Vigencia en minutos.")

    parser_alertas = subparsers.add_parser("alertas", help="Mostrar las alertas actuales de un usuario.")
    parser_alertas.add_argument("--email", type=str, required=True, help="Email del usuario.")

    args = parser.parse_args()
    db = SessionLocal()
    try:
        if args.command == "create-empresa":
            create_empresa(db, nombre=args.nombre, nit=args.nit, contacto=args.contacto, telefono=args.telefono, email=args.email)
        elif args.command == "create":
            create_user(db, nombre=args.nombre, email=args.email, rol=args.rol, empresa_nit=args.empresa_nit)
        elif args.command == "create-equipo":
            create_equipo(
                db, empresa_nit=args.empresa_nit, tipo=args.tipo, marca=args.marca, serial=args.serial,
                modelo=args.modelo, estado=args.estado, ubicacion=args.ubicacion,
            )
        elif args.command == "list-users":
            list_users(db)
        elif args.command == "token":
            emitir_token(db, email=args.email, minutos=args.minutos)
        elif args.command == "alertas":
            resumen_alertas(db, email=args.email)
    finally:
        db.close()

if __name__ == "__main__":
    main()
