# bookshop/api/deps.py
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from bookshop.data.database import get_db
from bookshop.domain.schemas import UserRead
from bookshop.repos.user_repo import UserRepo
from bookshop.services.notification_service import NotificationService
from bookshop.services.reservation_service import ReservationService
from bookshop.services.unit_of_work import SqlAlchemyAtomicRunner


def get_current_user(
    x_user_id: int | None = Header(None),
    db: Session = Depends(get_db),
) -> UserRead:
    """
    Tozsamosc wywolujacego (naglowek X-User-Id) - uwierzytelnienie jest poza
    serwisem, tu tylko sprawdzamy, ze uzytkownik dalej istnieje.
    """
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Access token required")

    user = UserRepo(db).get_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token - user not found")
    return UserRead.model_validate(user)


def get_reservation_service() -> ReservationService:
    return ReservationService(SqlAlchemyAtomicRunner())


def get_notification_service() -> NotificationService:
    return NotificationService()
