from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, DateTime, ForeignKey, BigInteger, CheckConstraint
from sqlalchemy.types import TypeDecorator
from datetime import datetime, timezone
from storefront.core.money import to_decimal
from storefront.db.session import Base

class UTCDateTime(TypeDecorator):
    """Stored as UTC, loaded back timezone-aware.

    SQLite keeps no offset for ``DateTime(timezone=True)``; naive values read
    from it are UTC by construction.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None: return None
        if value.tzinfo is None: return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None: return None
        if value.tzinfo is None: return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

class Product(Base):
    __tablename__ = 'products'
    __table_args__ = (
        CheckConstraint('price_cents >= 0', name='ck_products_price_non_negative'),
        CheckConstraint('stock >= 0', name='ck_products_stock_non_negative'),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(240), nullable=False)
    price_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def unit_price(self): return to_decimal(self.price_cents)

class Order(Base):
    __tablename__ = 'orders'
    __table_args__ = (
        CheckConstraint('total_cents >= 0', name='ck_orders_total_non_negative'),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    total_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    @property
    def total(self): return to_decimal(self.total_cents)

    items = relationship('OrderItem', back_populates='order', order_by='OrderItem.position', lazy='selectin', cascade='all, delete-orphan')

class OrderItem(Base):
    __tablename__ = 'order_items'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey('orders.id', ondelete='CASCADE'), index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    product_id: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)

    @property
    def unit_price(self): return to_decimal(self.unit_price_cents)

    order = relationship('Order', back_populates='items')
