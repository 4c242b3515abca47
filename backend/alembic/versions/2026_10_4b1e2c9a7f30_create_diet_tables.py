"""create foods, nutrients and diet rule tables

Revision ID: 4b1e2c9a7f30
Revises: 
Create Date: 2026-10-19 10:12:45.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1e2c9a7f30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NUTRIENT_COLUMNS = (
    "energy_kcal", "total_fat_g", "protein_g", "carbohydrate_g", "fiber_g", "sugars_g",
    "added_sugars_g", "sodium_mg", "potassium_mg", "calcium_mg", "iron_mg", "vitamin_c_mg",
    "cholesterol_mg", "saturated_fat_g", "vitamin_d_mcg", "magnesium_mg",
)


def _rule_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('limitation', sa.String(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f(f'ix_{name}_id'), name, ['id'], unique=False)
    op.create_index(op.f(f'ix_{name}_name'), name, ['name'], unique=False)


def upgrade() -> None:
    op.create_table(
        'foods',
        sa.Column('fdc_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('food_name', sa.String(), nullable=False),
        sa.Column('data_type', sa.String(), nullable=True),
        sa.Column('food_category', sa.String(), nullable=True),
        sa.Column('publication_date', sa.String(), nullable=True),
        sa.Column('allergen_flags', sa.String(), nullable=True),
        sa.PrimaryKeyConstraint('fdc_id'),
    )
    op.create_index(op.f('ix_foods_food_name'), 'foods', ['food_name'], unique=False)
    op.create_index(op.f('ix_foods_food_category'), 'foods', ['food_category'], unique=False)

    op.create_table(
        'nutrients',
        sa.Column('fdc_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('food_name', sa.String(), nullable=False),
        sa.Column('simplified_name', sa.String(), nullable=True),
        sa.Column('synonyms', sa.String(), nullable=True),
        *[sa.Column(col, sa.Float(), nullable=True) for col in NUTRIENT_COLUMNS],
        sa.PrimaryKeyConstraint('fdc_id'),
    )
    op.create_index(op.f('ix_nutrients_food_name'), 'nutrients', ['food_name'], unique=False)

    _rule_table('lchf_tbl')
    _rule_table('lfv_tbl')


def downgrade() -> None:
    for name in ('lfv_tbl', 'lchf_tbl'):
        op.drop_index(op.f(f'ix_{name}_name'), table_name=name)
        op.drop_index(op.f(f'ix_{name}_id'), table_name=name)
        op.drop_table(name)
    op.drop_index(op.f('ix_nutrients_food_name'), table_name='nutrients')
    op.drop_table('nutrients')
    op.drop_index(op.f('ix_foods_food_category'), table_name='foods')
    op.drop_index(op.f('ix_foods_food_name'), table_name='foods')
    op.drop_table('foods')
