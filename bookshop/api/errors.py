# bookshop/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookshop.domain.errors import (
    BookNotFound,
    CommitFailed,
    DuplicateGenre,
    DuplicateTitle,
    GenreInUse,
    GenreNotFound,
    InsufficientStock,
    InvalidCart,
    OrderNotFound,
    ShopError,
    UserNotFound,
)
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_ERROR = {
    InvalidCart: 400,
    BookNotFound: 404,
    InsufficientStock: 400,
    CommitFailed: 500,
    GenreNotFound: 404,
    DuplicateTitle: 400,
    DuplicateGenre: 400,
    GenreInUse: 400,
    OrderNotFound: 404,
    UserNotFound: 404,
}


def status_for(exc: ShopError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def error_details(exc: ShopError) -> dict | None:
    # pola strukturalne bledu, np. book_id / available / requested
    fields = {k: v for k, v in vars(exc).items() if k not in ("message", "reason")}
    return fields or None


def envelope(status_code: int, message: str, data=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "message": message, "data": data}),
    )


async def shop_error_handler(request: Request, exc: ShopError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return envelope(status_code, exc.message)
    logger.warning(f"{request.method} {request.url.path} rejected ({status_code}): {exc.message}")
    return envelope(status_code, exc.message, error_details(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    #nieznany endpoint - domyslne "Not Found" starlette
    if exc.status_code == 404 and exc.detail == "Not Found":
        return envelope(404, "Endpoint not found")
    return envelope(exc.status_code, str(exc.detail))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'Invalid request')}" if field else first.get("msg", "Invalid request")
    details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors]
    return envelope(400, message, {"errors": details})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} crashed: {exc!r}")
    return envelope(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopError, shop_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
