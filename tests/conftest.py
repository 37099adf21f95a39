"""Shared pytest fixtures: in-memory SQLite, fake Redis client, catalog factories."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.celery_worker import celery_app
from storefront.data import models  # noqa: F401
from storefront.data.database import Base
from storefront.domain.entities import (
    DeliverySettings,
    FixedRateSettings,
    Neighborhood,
    NeighborhoodRates,
    PickupSettings,
    Product,
    ProductImage,
    StoreSettings,
    VariationGroup,
    VariationOption,
)

# powiadomienia wykonywane od razu, bez brokera
celery_app.conf.task_always_eager = True


@dataclass
class FakeRedisClient:
    data: dict[str, str] = field(default_factory=dict)
    expiry: dict[str, int] = field(default_factory=dict)
    setex_calls: list[tuple[str, int]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self, key: str):
        return self.data.get(key)

    def setex(self, key: str, ttl: int, value: str) -> bool:
        with self._lock:
            self.data[key] = value
            self.expiry[key] = ttl
            self.setex_calls.append((key, ttl))
        return True

    def delete(self, key: str) -> int:
        with self._lock:
            existed = 1 if key in self.data else 0
            self.data.pop(key, None)
            self.expiry.pop(key, None)
        return existed

    def set(self, name: str, value: str, nx: bool = False, ex: int | None = None):
        with self._lock:
            if nx and name in self.data:
                return None
            self.data[name] = value
            if ex is not None:
                self.expiry[name] = ex
        return True

    def eval(self, _script: str, _keys_count: int, key: str, token: str) -> int:
        if self.data.get(key) == token:
            self.delete(key)
            return 1
        return 0


@pytest.fixture
def fake_redis() -> FakeRedisClient:
    return FakeRedisClient()


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def make_product(
    product_id: str = "p-1",
    price: str = "10.00",
    *,
    name: str = "Camiseta",
    groups: list[VariationGroup] | None = None,
    stock_control: bool = False,
    stock_quantity: int = 0,
    images: list[ProductImage] | None = None,
) -> Product:
    return Product(
        id=product_id,
        name=name,
        price=Decimal(price),
        variation_groups=groups or [],
        stock_control=stock_control,
        stock_quantity=stock_quantity,
        images=images or [],
    )


def size_group(required: bool = False, multiple: bool = False) -> VariationGroup:
    return VariationGroup(
        id="g-size",
        name="Tamanho",
        required=required,
        multiple_selection=multiple,
        options=[
            VariationOption(id="o-p", name="P", price_modifier=Decimal("0.00")),
            VariationOption(id="o-g", name="G", price_modifier=Decimal("2.00")),
            VariationOption(id="o-gg", name="GG", price_modifier=Decimal("3.50")),
        ],
    )


def make_settings(
    *,
    pickup: bool = True,
    fixed_fee: str | None = "5.00",
    neighborhoods: list[tuple[str, str, str]] | None = None,
    whatsapp: str | None = "(11) 98765-4321",
    store_name: str = "Loja Teste",
) -> StoreSettings:
    hoods = [Neighborhood(id=i, name=n, fee=Decimal(f)) for i, n, f in neighborhoods or []]
    return StoreSettings(
        store_name=store_name,
        whatsapp_number=whatsapp,
        delivery=DeliverySettings(
            pickup=PickupSettings(enabled=pickup),
            fixed_rate=FixedRateSettings(
                enabled=fixed_fee is not None,
                fee=Decimal(fixed_fee or "0"),
            ),
            neighborhood_rates=NeighborhoodRates(enabled=bool(hoods), neighborhoods=hoods),
        ),
    )
