"""
SQLAlchemy ORM models for the storefront payment bridge.

Tables:
    orders — checkout orders whose status is written back from payment notifications
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, JSON

from database import Base
from domain.enums import OrderStatus


class Order(Base):
    """A storefront order, keyed by its business order id."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(100), unique=True, nullable=False, index=True)  # gateway order id
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    gross_amount = Column(Integer, nullable=True)
    items = Column(JSON, nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_name = Column(String(200), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    callback_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
