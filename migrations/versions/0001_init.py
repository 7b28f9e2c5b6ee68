"""init schema

Revision ID: 0001_init
Revises: 
Create Date: 2024-03-01 00:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('tenants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('contact_number', sa.String(length=10), nullable=False),
        sa.Column('address', sa.String(length=512), nullable=False),
        sa.Column('photo', sa.String(length=255), nullable=True),
        sa.Column('aadhaar_number', sa.String(length=12), nullable=False),
        sa.Column('aadhaar_file', sa.String(length=255), nullable=False),
        sa.Column('pan_number', sa.String(length=10), nullable=False),
        sa.Column('pan_file', sa.String(length=255), nullable=False),
        sa.Column('monthly_rent', sa.Numeric(10, 2), nullable=False),
        sa.Column('deposit', sa.Numeric(10, 2), nullable=False),
        sa.Column('accommodation_from_date', sa.Date(), nullable=False),
        sa.Column('agreement_done', sa.Boolean(), nullable=False),
        sa.Column('agreement_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tenants_name', 'tenants', ['name'])
    op.create_index('ix_tenants_contact_number', 'tenants', ['contact_number'])
    op.create_index('ix_tenants_aadhaar_number', 'tenants', ['aadhaar_number'], unique=True)
    op.create_index('ix_tenants_pan_number', 'tenants', ['pan_number'], unique=True)
    op.create_index('ix_tenants_is_active', 'tenants', ['is_active'])

    op.create_table('rent_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('month', sa.String(length=7), nullable=False),
        sa.Column('rent_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('light_bill_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('whatsapp_sent', sa.Boolean(), nullable=False),
        sa.Column('whatsapp_sent_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'month', name='uq_rent_records_tenant_month')
    )
    op.create_index('ix_rent_records_tenant_id', 'rent_records', ['tenant_id'])
    op.create_index('ix_rent_records_month', 'rent_records', ['month'])
    op.create_index('ix_rent_records_status', 'rent_records', ['status'])
    op.create_index('ix_rent_records_payment_date', 'rent_records', ['payment_date'])

def downgrade():
    op.drop_table('rent_records')
    op.drop_table('tenants')
