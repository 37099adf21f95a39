from sqlalchemy import JSON, Column, DateTime, String, Text

from storefront.data.database import Base, utcnow


class StoreSettingsModel(Base):
    __tablename__ = "store_settings"

    id = Column(String(36), primary_key=True)
    store_name = Column(String, nullable=False)
    store_description = Column(Text, nullable=True)
    logo_url = Column(String, nullable=True)
    banner_url = Column(String, nullable=True)
    primary_color = Column(String(16), nullable=True)
    secondary_color = Column(String(16), nullable=True)
    whatsapp_number = Column(String(32), nullable=True)

    # jsonb w oryginalnej bazie, klucze camelCase
    social_links = Column(JSON, nullable=True)
    contact_info = Column(JSON, nullable=True)
    delivery_settings = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
