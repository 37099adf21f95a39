# storefront/repos/order_repo.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_orders(self, status: Optional[str] = None) -> List[OrderModel]:
        query = select(OrderModel).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        if status:
            query = query.where(OrderModel.status == status)
        return list(self.db.execute(query).scalars().all())

    def update_order(self, order_id: int, **values) -> OrderModel | None:
        order = self.get_order(order_id)
        if order:
            for key, value in values.items():
                setattr(order, key, value)
            self.db.commit()
            self.db.refresh(order)
        return order

    def rollback(self):
        self.db.rollback()
