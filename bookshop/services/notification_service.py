# bookshop/services/notification_service.py
from bookshop.celery_worker import celery_app
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień o zamówieniach.
    Używa Celery do asynchronicznego przetwarzania, poza jednostką pracy rezerwacji.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, total_price: str):
        send_order_notification_task.delay(user_id, order_id, total_price)


@celery_app.task(name="bookshop.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, total_price: str):
    """
    Celery task - potwierdzenie zamówienia.
    Na razie tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} confirmed, total {total_price}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
