# bookshop/domain/errors.py
"""
Wyjatki domenowe.

Serwisy rzucaja je przy naruszeniu regul biznesowych, warstwa HTTP
(bookshop.api.errors) tlumaczy je na kody statusu i envelope odpowiedzi.
"""
from typing import Iterable


class ShopError(Exception):
    """Bazowa klasa dla wszystkich bledow domenowych."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# =====================================================
# Rezerwacja (place_order)
# =====================================================
class InvalidCart(ShopError, ValueError):
    """Koszyk pusty albo z iloscia <= 0."""


class BookNotFound(ShopError):
    def __init__(self, book_ids: Iterable[int]):
        self.book_ids = sorted(set(book_ids))
        ids = ", ".join(str(i) for i in self.book_ids)
        super().__init__(f"One or more books not found: {ids}")


class InsufficientStock(ShopError):
    def __init__(self, book_id: int, title: str, available: int, requested: int):
        self.book_id = book_id
        self.title = title
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for book: {title}. "
            f"Available: {available}, Requested: {requested}"
        )


class CommitFailed(ShopError):
    """Blad bazy w trakcie jednostki pracy - bezpieczny do ponowienia."""

    def __init__(self, reason: str = "Failed to create transaction"):
        self.reason = reason
        super().__init__(reason)


# =====================================================
# Katalog / odczyt
# =====================================================
class GenreNotFound(ShopError):
    def __init__(self, genre_id: int):
        self.genre_id = genre_id
        super().__init__("Genre not found")


class DuplicateTitle(ShopError):
    def __init__(self, title: str):
        self.title = title
        super().__init__("Book with this title already exists")


class DuplicateGenre(ShopError):
    def __init__(self, name: str):
        self.name = name
        super().__init__("Genre with this name already exists")


class GenreInUse(ShopError):
    def __init__(self, genre_id: int, book_count: int):
        self.genre_id = genre_id
        self.book_count = book_count
        super().__init__(
            "Cannot delete genre that has books. Please delete or move the books first."
        )


class OrderNotFound(ShopError):
    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__("Transaction not found")


class UserNotFound(ShopError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("User not found")


# =====================================================
# Warstwa store - nie wychodza poza silnik rezerwacji
# =====================================================
class StoreError(Exception):
    """Blad bazy danych w trakcie jednostki pracy."""


class StoreConflict(StoreError):
    """Lock timeout / deadlock / serialization failure - mozna powtorzyc."""
