from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, Numeric, String, Text

from storefront.data.database import Base, utcnow


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String(32), nullable=False, unique=True, index=True)

    customer_name = Column(String, nullable=False)
    customer_phone = Column(String(32), nullable=False)
    customer_address = Column(JSON, nullable=True)

    items = Column(JSON, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_option = Column(JSON, nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(String, nullable=False, default="new")  # new, processing, shipped, delivered, cancelled
    whatsapp_sent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
