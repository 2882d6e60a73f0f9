# bookshop/api/routers/transactions.py
from typing import List, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookshop.api.deps import get_current_user, get_notification_service, get_reservation_service
from bookshop.data.database import get_db
from bookshop.domain.reservation import CartItem
from bookshop.domain.schemas import (
    ApiResponse,
    OrderSummaryOut,
    TransactionCreate,
    TransactionDetail,
    TransactionListItem,
    TransactionStatistics,
    UserRead,
)
from bookshop.services.notification_service import NotificationService
from bookshop.services.order_query_service import OrderQueryService
from bookshop.services.reservation_service import ReservationService
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


def get_query_service(db: Session):
    return OrderQueryService(db)


@router.post("", response_model=ApiResponse[OrderSummaryOut], status_code=201)
def create_transaction(
    payload: TransactionCreate,
    user: UserRead = Depends(get_current_user),
    reservations: ReservationService = Depends(get_reservation_service),
    notifications: NotificationService = Depends(get_notification_service),
):
    """
    Tworzy zamówienie z koszyka: wszystko albo nic.
    Powiadomienie wysyłane asynchronicznie, już po commicie.
    """
    cart = [CartItem(book_id=i.book_id, quantity=i.quantity) for i in payload.items]
    summary = reservations.place_order(user.id, cart)

    try:
        notifications.send_order_notification(user.id, summary.order_id, str(summary.total_price))
    except Exception as e:
        # zamowienie juz zapisane, brak powiadomienia nie cofa transakcji
        logger.warning(f"Order {summary.order_id} notification not dispatched: {e}")

    return {
        "message": "Transaction created successfully",
        "data": OrderSummaryOut(
            transaction_id=summary.order_id,
            total_quantity=summary.total_quantity,
            total_price=summary.total_price,
        ),
    }


@router.get("/statistics", response_model=ApiResponse[TransactionStatistics])
def get_statistics(
    user: UserRead = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_query_service(db)
    return {"message": "Get transactions statistics successfully", "data": svc.statistics(user.id)}


@router.get("", response_model=ApiResponse[List[TransactionListItem]])
def list_transactions(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    sort_order: Literal["asc", "desc"] = "desc",
    user: UserRead = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_query_service(db)
    rows, pagination = svc.list_orders(user.id, sort_order=sort_order, page=page, limit=limit)
    return {
        "message": "Get all transaction successfully",
        "data": rows,
        "meta": pagination.model_dump(),
    }


@router.get("/{transaction_id}", response_model=ApiResponse[TransactionDetail])
def get_transaction(
    transaction_id: int,
    user: UserRead = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_query_service(db)
    return {"message": "Get transaction detail successfully", "data": svc.get_order(transaction_id, user.id)}
