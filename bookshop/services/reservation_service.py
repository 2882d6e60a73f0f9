# bookshop/services/reservation_service.py
from decimal import Decimal
from typing import Dict, List, Sequence

from bookshop.domain.errors import (
    BookNotFound,
    CommitFailed,
    InsufficientStock,
    InvalidCart,
    StoreError,
)
from bookshop.domain.reservation import AtomicRunner, CartItem, OrderSummary, UnitOfWork
from bookshop.utils.logging import get_logger
from bookshop.utils.retry import store_retry
from bookshop.utils.settings import RESERVATION_MAX_ATTEMPTS

logger = get_logger(__name__)

CENT = Decimal("0.01")


def _validate_cart(cart: Sequence[CartItem]) -> List[CartItem]:
    items = list(cart)
    if not items:
        raise InvalidCart("Items array is required and must not be empty")
    for item in items:
        if not isinstance(item.quantity, int) or isinstance(item.quantity, bool) or item.quantity <= 0:
            raise InvalidCart("Quantity must be greater than 0")
    return items


def _reserve(uow: UnitOfWork, user_id: int, items: List[CartItem]) -> OrderSummary:
    # zagregowany popyt per ksiazka (duplikaty book_id sie sumuja)
    demand: Dict[int, int] = {}
    for item in items:
        demand[item.book_id] = demand.get(item.book_id, 0) + item.quantity

    #kanoniczna kolejnosc - blokady zawsze rosnaco po id
    book_ids = sorted(demand)

    books = {b.id: b for b in uow.books.find_books_by_ids(book_ids, lock=True)}
    if len(books) < len(book_ids):
        raise BookNotFound(i for i in book_ids if i not in books)

    for book_id in book_ids:
        book = books[book_id]
        if demand[book_id] > book.stock_quantity:
            raise InsufficientStock(book.id, book.title, book.stock_quantity, demand[book_id])

    prices = {book_id: Decimal(str(books[book_id].price)) for book_id in book_ids}

    # warunkowy update: stock_quantity >= amount sprawdzane jeszcze raz przy zapisie
    for book_id in book_ids:
        if not uow.books.decrement_stock(book_id, demand[book_id]):
            current = uow.books.get_book(book_id)
            if current is None:
                raise BookNotFound([book_id])
            raise InsufficientStock(current.id, current.title, current.stock_quantity, demand[book_id])

    order = uow.orders.create_order(user_id)

    # jedna pozycja na kazdy wpis koszyka, nie na ksiazke
    total_price = Decimal("0.00")
    for item in items:
        unit_price = prices[item.book_id]
        uow.orders.create_line_item(order.id, item.book_id, item.quantity, unit_price)
        total_price += unit_price * item.quantity

    return OrderSummary(
        order_id=order.id,
        total_quantity=sum(i.quantity for i in items),
        total_price=total_price.quantize(CENT),
    )


class ReservationService:
    """
    Silnik rezerwacji: koszyk -> zamowienie + pozycje + zmniejszenie stanow,
    wszystko albo nic. Bezstanowy, caly stan zyje w store.
    """

    def __init__(self, runner: AtomicRunner, max_attempts: int | None = None):
        self.runner = runner
        self.max_attempts = max_attempts or RESERVATION_MAX_ATTEMPTS

    def place_order(self, user_id: int, cart: Sequence[CartItem]) -> OrderSummary:
        """
        Use Case: zlozenie zamowienia.

        1. Walidacja koszyka (ilosci > 0)
        2. Odczyt i blokada ksiazek, sprawdzenie istnienia i stanow
        3. Zmniejszenie stanow, utworzenie zamowienia i pozycji
        4. Commit

        BookNotFound / InsufficientStock - blad klienta, bez ponawiania.
        Konflikt blokad - ponawiamy cala jednostke pracy, potem CommitFailed.
        """
        items = _validate_cart(cart)
        logger.info(f"Placing order for user {user_id}: {len(items)} line(s)")

        @store_retry(self.max_attempts)
        def attempt() -> OrderSummary:
            return self.runner.run_atomic(lambda uow: _reserve(uow, user_id, items))

        try:
            summary = attempt()
        except StoreError as e:
            logger.error(f"Order for user {user_id} not committed: {e}")
            raise CommitFailed() from e

        logger.info(
            f"Order {summary.order_id} committed for user {user_id}, "
            f"quantity {summary.total_quantity}, total {summary.total_price}"
        )
        return summary
