"""create_storefront_tables

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-19 09:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Catalog
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('contact_no', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_customers'),
        sa.UniqueConstraint('email', name='uq_customers_email'),
    )
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_products'),
    )
    op.create_table(
        'discounts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('percentage', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.CheckConstraint('percentage > 0 AND percentage <= 100', name='ck_discounts_valid_percentage'),
        sa.PrimaryKeyConstraint('id', name='pk_discounts'),
        sa.UniqueConstraint('code', name='uq_discounts_code'),
    )

    # Cart / wishlist lines
    op.create_table(
        'cart',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quantity >= 1', name='ck_cart_positive_quantity'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_cart_customer_id_customers', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], name='fk_cart_product_id_products', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_cart'),
        sa.UniqueConstraint('customer_id', 'product_id', name='uq_cart_customer_product'),
    )
    op.create_index('ix_cart_customer_id', 'cart', ['customer_id'], unique=False)
    op.create_table(
        'wishlist',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quantity >= 1', name='ck_wishlist_positive_quantity'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_wishlist_customer_id_customers', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], name='fk_wishlist_product_id_products', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_wishlist'),
        sa.UniqueConstraint('customer_id', 'product_id', name='uq_wishlist_customer_product'),
    )
    op.create_index('ix_wishlist_customer_id', 'wishlist', ['customer_id'], unique=False)

    op.create_table(
        'tax',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('tax_rate', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('tax_type', sa.String(length=50), nullable=True),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], name='fk_tax_product_id_products', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_tax'),
    )
    op.create_index('ix_tax_product_id', 'tax', ['product_id'], unique=False)

    # Orders and dependents. orders.payment_id gets its FK once payments exists.
    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('order_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('payment_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_orders_customer_id_customers'),
        sa.PrimaryKeyConstraint('id', name='pk_orders'),
    )
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'], unique=False)
    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('subtotal', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.CheckConstraint('quantity >= 1', name='ck_order_items_positive_quantity'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], name='fk_order_items_order_id_orders', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], name='fk_order_items_product_id_products'),
        sa.PrimaryKeyConstraint('id', name='pk_order_items'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'], unique=False)
    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=False),
        sa.Column('payment_status', sa.String(length=32), nullable=False),
        sa.Column('transaction_id', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], name='fk_payments_order_id_orders'),
        sa.PrimaryKeyConstraint('id', name='pk_payments'),
    )
    op.create_index('ix_payments_order_id', 'payments', ['order_id'], unique=False)
    with op.batch_alter_table('orders') as batch_op:
        batch_op.create_foreign_key(
            'fk_orders_payment_id_payments', 'payments', ['payment_id'], ['id']
        )

    op.create_table(
        'tracking_info',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('estimated_delivery', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], name='fk_tracking_info_order_id_orders'),
        sa.PrimaryKeyConstraint('id', name='pk_tracking_info'),
    )
    op.create_index('ix_tracking_info_order_id', 'tracking_info', ['order_id'], unique=False)
    op.create_table(
        'shipping',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('tracking_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], name='fk_shipping_order_id_orders'),
        sa.ForeignKeyConstraint(['tracking_id'], ['tracking_info.id'], name='fk_shipping_tracking_id_tracking_info'),
        sa.PrimaryKeyConstraint('id', name='pk_shipping'),
    )
    op.create_index('ix_shipping_order_id', 'shipping', ['order_id'], unique=False)

    # After-sales
    op.create_table(
        'return_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_item_id', sa.Integer(), nullable=False),
        sa.Column('payment_id', sa.Integer(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('request_date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['order_item_id'], ['order_items.id'], name='fk_return_requests_order_item_id_order_items'),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.id'], name='fk_return_requests_payment_id_payments'),
        sa.PrimaryKeyConstraint('id', name='pk_return_requests'),
    )
    op.create_index('ix_return_requests_order_item_id', 'return_requests', ['order_item_id'], unique=False)
    op.create_table(
        'exchange_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_item_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('exchange_date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['order_item_id'], ['order_items.id'], name='fk_exchange_requests_order_item_id_order_items'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], name='fk_exchange_requests_product_id_products'),
        sa.PrimaryKeyConstraint('id', name='pk_exchange_requests'),
    )
    op.create_index('ix_exchange_requests_order_item_id', 'exchange_requests', ['order_item_id'], unique=False)
    op.create_table(
        'customer_support',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('response', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_customer_support_customer_id_customers', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_customer_support'),
    )
    op.create_index('ix_customer_support_customer_id', 'customer_support', ['customer_id'], unique=False)

    # Loyalty
    op.create_table(
        'loyalty_points',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('earned_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('points >= 0', name='ck_loyalty_points_non_negative_points'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_loyalty_points_customer_id_customers', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_loyalty_points'),
    )
    op.create_index('ix_loyalty_points_customer_id', 'loyalty_points', ['customer_id'], unique=True)
    op.create_table(
        'points_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], name='fk_points_history_customer_id_customers', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_points_history'),
    )
    op.create_index('ix_points_history_customer_id', 'points_history', ['customer_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_points_history_customer_id', table_name='points_history')
    op.drop_table('points_history')
    op.drop_index('ix_loyalty_points_customer_id', table_name='loyalty_points')
    op.drop_table('loyalty_points')
    op.drop_index('ix_customer_support_customer_id', table_name='customer_support')
    op.drop_table('customer_support')
    op.drop_index('ix_exchange_requests_order_item_id', table_name='exchange_requests')
    op.drop_table('exchange_requests')
    op.drop_index('ix_return_requests_order_item_id', table_name='return_requests')
    op.drop_table('return_requests')
    op.drop_index('ix_shipping_order_id', table_name='shipping')
    op.drop_table('shipping')
    op.drop_index('ix_tracking_info_order_id', table_name='tracking_info')
    op.drop_table('tracking_info')
    with op.batch_alter_table('orders') as batch_op:
        batch_op.drop_constraint('fk_orders_payment_id_payments', type_='foreignkey')
    op.drop_index('ix_payments_order_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_order_items_order_id', table_name='order_items')
    op.drop_table('order_items')
    op.drop_index('ix_orders_customer_id', table_name='orders')
    op.drop_table('orders')
    op.drop_index('ix_tax_product_id', table_name='tax')
    op.drop_table('tax')
    op.drop_index('ix_wishlist_customer_id', table_name='wishlist')
    op.drop_table('wishlist')
    op.drop_index('ix_cart_customer_id', table_name='cart')
    op.drop_table('cart')
    op.drop_table('discounts')
    op.drop_table('products')
    op.drop_table('customers')
