# bookshop/domain/reservation.py
"""
Typy i porty uzywane przez silnik rezerwacji (ReservationService).

Silnik nie zna SQLAlchemy - rozmawia tylko z CatalogStore i OrderLedger,
wystawionymi przez AtomicRunner w ramach jednej jednostki pracy.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CartItem:
    book_id: int
    quantity: int


@dataclass(frozen=True)
class OrderSummary:
    order_id: int
    total_quantity: int
    total_price: Decimal


class StockedBook(Protocol):
    id: int
    title: str
    price: Decimal
    stock_quantity: int


class CreatedOrder(Protocol):
    id: int
    user_id: int


class CatalogStore(Protocol):
    def find_books_by_ids(self, ids: Sequence[int], lock: bool = False) -> List[StockedBook]:
        """Aktywne (nieusuniete) ksiazki; z lock=True blokuje wiersze w kolejnosci id."""
        ...

    def get_book(self, book_id: int) -> Optional[StockedBook]:
        ...

    def decrement_stock(self, book_id: int, amount: int) -> bool:
        """Zmniejsza stan tylko gdy stock_quantity >= amount; False gdy nic nie zmieniono."""
        ...


class OrderLedger(Protocol):
    def create_order(self, user_id: int) -> CreatedOrder:
        ...

    def create_line_item(self, order_id: int, book_id: int, quantity: int, unit_price: Decimal) -> None:
        ...


class UnitOfWork(Protocol):
    books: CatalogStore
    orders: OrderLedger


class AtomicRunner(Protocol):
    def run_atomic(self, fn: Callable[[UnitOfWork], T]) -> T:
        """Wszystkie zapisy fn widoczne razem albo wcale."""
        ...
