# bookshop/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from bookshop.domain.errors import StoreConflict
from bookshop.utils.settings import RESERVATION_MAX_ATTEMPTS


#konflikt blokad (lock / deadlock / serialization) - powtarzamy cala jednostke pracy
def store_retry(attempts: int | None = None):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or RESERVATION_MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception_type(StoreConflict),
    )
