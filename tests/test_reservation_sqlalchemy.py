import threading
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from bookshop.data.database import SessionLocal
from bookshop.data.models import BookModel, OrderItemModel, OrderModel
from bookshop.domain.errors import BookNotFound, InsufficientStock
from bookshop.domain.reservation import CartItem
from bookshop.repos.book_repo import BookRepo
from bookshop.services.reservation_service import ReservationService
from bookshop.services.unit_of_work import SqlAlchemyAtomicRunner


@pytest.fixture
def service():
    return ReservationService(SqlAlchemyAtomicRunner())


@pytest.fixture
def user(make_user):
    return make_user()


def _counts(db):
    orders = db.execute(select(func.count(OrderModel.id))).scalar_one()
    lines = db.execute(select(func.count(OrderItemModel.id))).scalar_one()
    return orders, lines


def test_scenario_against_database(service, user, make_book, stock_of, db):
    a = make_book("Book A", price="10.00", stock=5)
    b = make_book("Book B", price="8.00", stock=0)

    summary = service.place_order(user.id, [CartItem(a.id, 3)])
    assert summary.total_quantity == 3
    assert summary.total_price == Decimal("30.00")
    assert stock_of(a.id) == 2

    with pytest.raises(InsufficientStock) as exc:
        service.place_order(user.id, [CartItem(b.id, 1)])
    assert (exc.value.book_id, exc.value.available, exc.value.requested) == (b.id, 0, 1)

    summary = service.place_order(user.id, [CartItem(a.id, 1), CartItem(a.id, 1)])
    assert summary.total_quantity == 2
    items = db.execute(
        select(OrderItemModel).where(OrderItemModel.order_id == summary.order_id)
    ).scalars().all()
    assert [i.quantity for i in items] == [1, 1]
    assert all(Decimal(str(i.unit_price)) == Decimal("10.00") for i in items)
    assert stock_of(a.id) == 0


def test_failed_order_leaves_no_trace(service, user, make_book, stock_of, db):
    a = make_book("Book A", stock=5)
    b = make_book("Book B", stock=1)

    with pytest.raises(InsufficientStock):
        service.place_order(user.id, [CartItem(a.id, 2), CartItem(b.id, 2)])

    assert stock_of(a.id) == 5
    assert stock_of(b.id) == 1
    assert _counts(db) == (0, 0)


def test_soft_deleted_book_is_not_found(service, user, make_book, stock_of, db):
    a = make_book("Book A", stock=5, deleted_at=datetime.now(timezone.utc))

    with pytest.raises(BookNotFound) as exc:
        service.place_order(user.id, [CartItem(a.id, 1), CartItem(9999, 1)])

    assert exc.value.book_ids == [a.id, 9999]
    assert stock_of(a.id) == 5
    assert _counts(db) == (0, 0)


def test_guarded_decrement_refuses_to_go_negative(make_book, stock_of):
    a = make_book("Book A", stock=2)
    session = SessionLocal()
    try:
        repo = BookRepo(session)
        assert repo.decrement_stock(a.id, 3) is False
        assert repo.decrement_stock(a.id, 2) is True
        assert repo.decrement_stock(a.id, 1) is False
        session.commit()
    finally:
        session.close()
    assert stock_of(a.id) == 0


def test_stock_checked_again_at_write_time(user, make_book, stock_of, db):
    """Stan sprzedany miedzy odczytem a zapisem -> InsufficientStock, bez zmian."""
    a = make_book("Book A", stock=1)

    class RacingRepo(BookRepo):
        def decrement_stock(self, book_id, amount):
            # ktos inny kupil ostatni egzemplarz
            other = SessionLocal()
            try:
                other.get(BookModel, book_id).stock_quantity = 0
                other.commit()
            finally:
                other.close()
            return super().decrement_stock(book_id, amount)

    class RacingRunner(SqlAlchemyAtomicRunner):
        def run_atomic(self, fn):
            def wrapped(uow):
                uow.books = RacingRepo(uow.db)
                return fn(uow)
            return super().run_atomic(wrapped)

    with pytest.raises(InsufficientStock) as exc:
        ReservationService(RacingRunner()).place_order(user.id, [CartItem(a.id, 1)])

    assert exc.value.available == 0
    assert stock_of(a.id) == 0
    assert _counts(db) == (0, 0)


def test_two_concurrent_buyers_for_last_copy(user, make_book, stock_of, db):
    book = make_book("Last Copy", price="12.00", stock=1)
    book_id, user_id = book.id, user.id
    barrier = threading.Barrier(2)
    results = []
    lock = threading.Lock()

    def buy():
        service = ReservationService(SqlAlchemyAtomicRunner())
        barrier.wait()
        try:
            outcome = service.place_order(user_id, [CartItem(book_id, 1)])
        except InsufficientStock as e:
            outcome = e
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=buy) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    failures = [r for r in results if isinstance(r, InsufficientStock)]
    successes = [r for r in results if not isinstance(r, InsufficientStock)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert failures[0].available == 0
    assert stock_of(book_id) == 0
    assert _counts(db) == (1, 1)
