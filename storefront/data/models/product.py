from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base, utcnow


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    stock_control = Column(Boolean, nullable=False, default=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    auto_stock_reduction = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    category = relationship("CategoryModel")
    images = relationship(
        "ProductImageModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImageModel.order_position",
    )
    variation_groups = relationship(
        "VariationGroupModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="VariationGroupModel.order_position",
    )


class ProductImageModel(Base):
    __tablename__ = "product_images"

    id = Column(String(36), primary_key=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    url = Column(String, nullable=False)
    is_main = Column(Boolean, nullable=False, default=False)
    order_position = Column(Integer, nullable=False, default=0)

    product = relationship("ProductModel", back_populates="images")


class VariationGroupModel(Base):
    __tablename__ = "product_variation_groups"

    id = Column(String(36), primary_key=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    required = Column(Boolean, nullable=False, default=False)
    multiple_selection = Column(Boolean, nullable=False, default=False)
    order_position = Column(Integer, nullable=False, default=0)

    product = relationship("ProductModel", back_populates="variation_groups")
    options = relationship(
        "VariationOptionModel",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="VariationOptionModel.order_position",
    )


class VariationOptionModel(Base):
    __tablename__ = "product_variation_options"

    id = Column(String(36), primary_key=True)
    group_id = Column(String(36), ForeignKey("product_variation_groups.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    price_modifier = Column(Numeric(10, 2), nullable=False, default=0)
    stock_quantity = Column(Integer, nullable=True)
    order_position = Column(Integer, nullable=False, default=0)

    group = relationship("VariationGroupModel", back_populates="options")
