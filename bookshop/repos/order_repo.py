# bookshop/repos/order_repo.py
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from bookshop.data.models.book import BookModel
from bookshop.data.models.genre import GenreModel
from bookshop.data.models.order import OrderModel
from bookshop.data.models.order_item import OrderItemModel


class OrderRepo:
    """
    Order ledger: zamowienia i pozycje sa tylko dopisywane.
    Zapisy nie robia commita - commit nalezy do jednostki pracy.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_order(self, user_id: int) -> OrderModel:
        order = OrderModel(user_id=user_id)
        self.db.add(order)
        self.db.flush()  # potrzebne order.id dla pozycji
        return order

    def create_line_item(self, order_id: int, book_id: int, quantity: int, unit_price: Decimal) -> None:
        self.db.add(
            OrderItemModel(
                order_id=order_id,
                book_id=book_id,
                quantity=quantity,
                unit_price=unit_price,
            )
        )

    # =====================================================
    # odczyt
    # =====================================================
    def get_order_for_user(self, order_id: int, user_id: int) -> Optional[OrderModel]:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.user_id == user_id)
            .options(selectinload(OrderModel.items).selectinload(OrderItemModel.book))
        ).scalar_one_or_none()

    def list_orders_for_user(
        self,
        user_id: int,
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[OrderModel], int]:
        if sort_order == "asc":
            ordering = (OrderModel.created_at.asc(), OrderModel.id.asc())
        else:
            ordering = (OrderModel.created_at.desc(), OrderModel.id.desc())

        total = self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.user_id == user_id)
        ).scalar_one()
        orders = self.db.execute(
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .options(selectinload(OrderModel.items))
            .order_by(*ordering)
            .offset(offset)
            .limit(limit)
        ).scalars().all()
        return list(orders), total

    def count_orders_for_user(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.user_id == user_id)
        ).scalar_one()

    def total_spent_by_user(self, user_id: int) -> Decimal:
        total = self.db.execute(
            select(func.sum(OrderItemModel.unit_price * OrderItemModel.quantity))
            .select_from(OrderItemModel)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .where(OrderModel.user_id == user_id)
        ).scalar_one()
        return Decimal(str(total)) if total is not None else Decimal("0.00")

    def quantity_by_genre_for_user(self, user_id: int) -> List[Tuple[str, int]]:
        rows = self.db.execute(
            select(GenreModel.name, func.sum(OrderItemModel.quantity))
            .select_from(OrderItemModel)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .join(BookModel, OrderItemModel.book_id == BookModel.id)
            .join(GenreModel, BookModel.genre_id == GenreModel.id)
            .where(OrderModel.user_id == user_id)
            .group_by(GenreModel.id, GenreModel.name)
            .order_by(GenreModel.id)
        ).all()
        return [(name, int(qty)) for name, qty in rows]
