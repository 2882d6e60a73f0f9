# bookshop/services/unit_of_work.py
from typing import Callable, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from bookshop.data.database import SessionLocal
from bookshop.domain.errors import StoreConflict, StoreError
from bookshop.repos.book_repo import BookRepo
from bookshop.repos.order_repo import OrderRepo
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# postgres: deadlock_detected, serialization_failure, lock_not_available
_CONFLICT_SQLSTATES = {"40P01", "40001", "55P03"}
# sqlite: zapis zablokowany przez inna transakcje
_CONFLICT_MESSAGES = ("database is locked", "database table is locked")


def _is_conflict(exc: OperationalError) -> bool:
    orig = exc.orig
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate in _CONFLICT_SQLSTATES:
        return True
    return any(m in str(orig) for m in _CONFLICT_MESSAGES)


class SqlAlchemyUnitOfWork:
    """Widok na store w ramach jednej transakcji: books (katalog) + orders (ledger)."""

    def __init__(self, db: Session):
        self.db = db
        self.books = BookRepo(db)
        self.orders = OrderRepo(db)


class SqlAlchemyAtomicRunner:
    """
    run_atomic(fn): nowa sesja, jedna transakcja.
    - fn konczy sie normalnie -> commit
    - fn rzuca wyjatek -> rollback, wyjatek leci dalej bez zmian
    - blad bazy -> StoreConflict (do ponowienia) albo StoreError
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def run_atomic(self, fn: Callable[[SqlAlchemyUnitOfWork], T]) -> T:
        db = self.session_factory()
        try:
            with db.begin():
                return fn(SqlAlchemyUnitOfWork(db))
        except OperationalError as e:
            if _is_conflict(e):
                logger.warning(f"Unit of work conflict, rolled back: {e.orig}")
                raise StoreConflict(str(e.orig)) from e
            logger.error(f"Unit of work failed, rolled back: {e}")
            raise StoreError(str(e)) from e
        except SQLAlchemyError as e:
            logger.error(f"Unit of work failed, rolled back: {e}")
            raise StoreError(str(e)) from e
        finally:
            db.close()
