# bookshop/services/order_query_service.py
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Tuple

from sqlalchemy.orm import Session

from bookshop.data.models.order import OrderModel
from bookshop.domain.errors import OrderNotFound
from bookshop.domain.schemas import (
    Pagination,
    TransactionDetail,
    TransactionItemOut,
    TransactionListItem,
    TransactionStatistics,
)
from bookshop.repos.order_repo import OrderRepo
from bookshop.utils.pagination import page_window, pagination_meta

CENT = Decimal("0.01")


def _totals(order: OrderModel) -> Tuple[int, Decimal]:
    quantity = sum(i.quantity for i in order.items)
    price = sum((Decimal(str(i.unit_price)) * i.quantity for i in order.items), Decimal("0.00"))
    return quantity, price.quantize(CENT)


class OrderQueryService:
    """
    Strona odczytu zamowien (Query). Nigdy nie modyfikuje stanow ani zamowien.
    Zamowienie widzi tylko jego wlasciciel.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def list_orders(
        self,
        user_id: int,
        sort_order: str = "desc",
        page: int | None = 1,
        limit: int | None = None,
    ) -> Tuple[List[TransactionListItem], Pagination]:
        page, limit, offset = page_window(page, limit)
        orders, total = self.repo.list_orders_for_user(user_id, sort_order=sort_order, offset=offset, limit=limit)

        rows = []
        for order in orders:
            quantity, price = _totals(order)
            rows.append(
                TransactionListItem(
                    id=order.id,
                    total_quantity=quantity,
                    total_price=price,
                    created_at=order.created_at,
                )
            )
        return rows, Pagination(**pagination_meta(page, limit, total))

    def get_order(self, order_id: int, user_id: int) -> TransactionDetail:
        # cudze zamowienie = nieistniejace, nie zdradzamy ze istnieje
        order = self.repo.get_order_for_user(order_id, user_id)
        if not order:
            raise OrderNotFound(order_id)

        quantity, price = _totals(order)
        return TransactionDetail(
            id=order.id,
            items=[
                TransactionItemOut(
                    book_id=i.book_id,
                    book_title=i.book.title,
                    quantity=i.quantity,
                    unit_price=Decimal(str(i.unit_price)).quantize(CENT),
                    subtotal_price=(Decimal(str(i.unit_price)) * i.quantity).quantize(CENT),
                )
                for i in order.items
            ],
            total_quantity=quantity,
            total_price=price,
            created_at=order.created_at,
        )

    def statistics(self, user_id: int) -> TransactionStatistics:
        """
        Raport uzytkownika: liczba zamowien, srednia wartosc zamowienia,
        gatunek z najwieksza i najmniejsza laczna iloscia sprzedanych sztuk.
        Remisy rozstrzyga kolejnosc iteracji.
        """
        total_orders = self.repo.count_orders_for_user(user_id)
        total_spent = self.repo.total_spent_by_user(user_id)
        average = (total_spent / total_orders).quantize(CENT, rounding=ROUND_HALF_UP) if total_orders else Decimal("0.00")

        genres = self.repo.quantity_by_genre_for_user(user_id)
        most = max(genres, key=lambda g: g[1])[0] if genres else None
        least = min(genres, key=lambda g: g[1])[0] if genres else None

        return TransactionStatistics(
            total_transactions=total_orders,
            average_transaction_amount=average,
            fewest_book_sales_genre=least,
            most_book_sales_genre=most,
        )
