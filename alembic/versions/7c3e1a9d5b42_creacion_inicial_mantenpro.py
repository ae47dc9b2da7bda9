"""
Creacion inicial de la base de datos de MantenPro

Revision ID: 7c3e1a9d5b42
Revises:
Create Date: 2025-11-03 10:12:05.118203

Descripción:
Tablas empresas, usuarios, equipos, mantenimientos e historial con los
índices que usan el filtro de visibilidad (empresa_id, tecnico_id, equipo_id)
y el cálculo de alertas (estado, fecha_programada).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7c3e1a9d5b42'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('empresas',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('nombre', sa.String(length=255), nullable=False),
        sa.Column('nit', sa.String(length=50), nullable=False),
        sa.Column('contacto', sa.String(length=255), nullable=True),
        sa.Column('telefono', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('direccion', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_empresas')),
    )
    op.create_index(op.f('ix_empresas_nombre'), 'empresas', ['nombre'], unique=False)
    op.create_index(op.f('ix_empresas_nit'), 'empresas', ['nit'], unique=True)

    op.create_table('usuarios',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('nombre', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('rol', sa.String(length=20), nullable=False),
        sa.Column('empresa_id', sa.Uuid(), nullable=True),
        sa.Column('activo', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['empresa_id'], ['empresas.id'], name=op.f('fk_usuarios_empresa_id_empresas'), ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_usuarios')),
    )
    op.create_index(op.f('ix_usuarios_email'), 'usuarios', ['email'], unique=True)
    op.create_index(op.f('ix_usuarios_rol'), 'usuarios', ['rol'], unique=False)
    op.create_index(op.f('ix_usuarios_empresa_id'), 'usuarios', ['empresa_id'], unique=False)

    op.create_table('equipos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('empresa_id', sa.Uuid(), nullable=False),
        sa.Column('tipo', sa.String(length=50), nullable=False),
        sa.Column('marca', sa.String(length=50), nullable=False),
        sa.Column('modelo', sa.String(length=50), nullable=True),
        sa.Column('serial', sa.String(length=100), nullable=False),
        sa.Column('estado', sa.String(length=30), nullable=False),
        sa.Column('ubicacion', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['empresa_id'], ['empresas.id'], name=op.f('fk_equipos_empresa_id_empresas'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_equipos')),
    )
    op.create_index(op.f('ix_equipos_empresa_id'), 'equipos', ['empresa_id'], unique=False)
    op.create_index(op.f('ix_equipos_tipo'), 'equipos', ['tipo'], unique=False)
    op.create_index(op.f('ix_equipos_marca'), 'equipos', ['marca'], unique=False)
    op.create_index(op.f('ix_equipos_serial'), 'equipos', ['serial'], unique=True)
    op.create_index(op.f('ix_equipos_estado'), 'equipos', ['estado'], unique=False)

    op.create_table('mantenimientos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('equipo_id', sa.Uuid(), nullable=False),
        sa.Column('tecnico_id', sa.Uuid(), nullable=False),
        sa.Column('tipo', sa.String(length=20), nullable=False),
        sa.Column('estado', sa.String(length=20), nullable=False),
        sa.Column('fecha_programada', sa.DateTime(timezone=True), nullable=True),
        sa.Column('fecha_realizada', sa.DateTime(timezone=True), nullable=True),
        sa.Column('descripcion', sa.Text(), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['equipo_id'], ['equipos.id'], name=op.f('fk_mantenimientos_equipo_id_equipos'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tecnico_id'], ['usuarios.id'], name=op.f('fk_mantenimientos_tecnico_id_usuarios'), ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_mantenimientos')),
    )
    op.create_index(op.f('ix_mantenimientos_equipo_id'), 'mantenimientos', ['equipo_id'], unique=False)
    op.create_index(op.f('ix_mantenimientos_tecnico_id'), 'mantenimientos', ['tecnico_id'], unique=False)
    op.create_index(op.f('ix_mantenimientos_tipo'), 'mantenimientos', ['tipo'], unique=False)
    op.create_index(op.f('ix_mantenimientos_estado'), 'mantenimientos', ['estado'], unique=False)
    op.create_index(op.f('ix_mantenimientos_fecha_programada'), 'mantenimientos', ['fecha_programada'], unique=False)

    op.create_table('historial',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('equipo_id', sa.Uuid(), nullable=False),
        sa.Column('mantenimiento_id', sa.Uuid(), nullable=True),
        sa.Column('tecnico_id', sa.Uuid(), nullable=False),
        sa.Column('fecha', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('observaciones', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['equipo_id'], ['equipos.id'], name=op.f('fk_historial_equipo_id_equipos'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['mantenimiento_id'], ['mantenimientos.id'], name=op.f('fk_historial_mantenimiento_id_mantenimientos'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tecnico_id'], ['usuarios.id'], name=op.f('fk_historial_tecnico_id_usuarios'), ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_historial')),
    )
    op.create_index(op.f('ix_historial_equipo_id'), 'historial', ['equipo_id'], unique=False)
    op.create_index(op.f('ix_historial_mantenimiento_id'), 'historial', ['mantenimiento_id'], unique=False)
    op.create_index(op.f('ix_historial_tecnico_id'), 'historial', ['tecnico_id'], unique=False)
    op.create_index(op.f('ix_historial_fecha'), 'historial', ['fecha'], unique=False)


def downgrade() -> None:
    op.drop_table('historial')
    op.drop_table('mantenimientos')
    op.drop_table('equipos')
    op.drop_table('usuarios')
    op.drop_table('empresas')
