# bookshop/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Any, Dict, Generic, List, Optional, TypeVar
from decimal import Decimal
from datetime import datetime, timezone

T = TypeVar("T")

# zakres INTEGER w bazie
MAX_INT = 2**31 - 1


class ApiResponse(BaseModel, Generic[T]):
    """Standardowy envelope odpowiedzi: {success, message, data}."""

    success: bool = True
    message: str
    data: Optional[T] = None
    meta: Optional[Dict[str, Any]] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


# =====================================================
# Users
# =====================================================
class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    email: str = Field(..., pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$", max_length=255)
    username: Optional[str] = Field(None, min_length=1, max_length=100)


class UserRead(BaseModel):
    id: int
    email: str
    username: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# Genres
# =====================================================
class GenreCreate(BaseModel):
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def name_min_length(cls, v: str) -> str:
        if len(v.strip()) < 2:
            raise ValueError("Genre name must be at least 2 characters")
        return v.strip()


class GenreUpdate(GenreCreate):
    pass


class GenreRef(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class GenreOut(BaseModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =====================================================
# Books
# =====================================================
class BookCreate(BaseModel):
    """Schema dla tworzenia książki."""

    title: str = Field(..., min_length=1, max_length=255)
    writer: str = Field(..., min_length=1, max_length=255)
    publisher: str = Field(..., min_length=1, max_length=255)
    publication_year: int = Field(..., ge=1000)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    stock_quantity: int = Field(..., ge=0, le=MAX_INT)
    genre_id: int = Field(..., gt=0, le=MAX_INT)

    @field_validator("publication_year")
    @classmethod
    def not_in_future(cls, v: int) -> int:
        if v > datetime.now(timezone.utc).year:
            raise ValueError("Invalid publication year")
        return v


class BookUpdate(BaseModel):
    """Częściowa aktualizacja - tylko podane pola."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    writer: Optional[str] = Field(None, min_length=1, max_length=255)
    publisher: Optional[str] = Field(None, min_length=1, max_length=255)
    publication_year: Optional[int] = Field(None, ge=1000)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    stock_quantity: Optional[int] = Field(None, ge=0, le=MAX_INT)
    genre_id: Optional[int] = Field(None, gt=0, le=MAX_INT)

    @field_validator("publication_year")
    @classmethod
    def not_in_future(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v > datetime.now(timezone.utc).year:
            raise ValueError("Invalid publication year")
        return v


class BookOut(BaseModel):
    id: int
    title: str
    writer: str
    publisher: str
    publication_year: int
    description: Optional[str] = None
    price: Decimal
    stock_quantity: int
    genre_id: int
    genre: Optional[GenreRef] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookList(BaseModel):
    books: List[BookOut]
    pagination: Pagination


class GenreBookList(BookList):
    genre: GenreRef


# =====================================================
# Transactions (zamówienia)
# =====================================================
class CartItemIn(BaseModel):
    book_id: int = Field(..., gt=0, le=MAX_INT)
    quantity: int = Field(..., gt=0, le=MAX_INT, description="Ilość (musi być > 0)")


class TransactionCreate(BaseModel):
    items: List[CartItemIn] = Field(..., min_length=1)


class OrderSummaryOut(BaseModel):
    transaction_id: int
    total_quantity: int
    total_price: Decimal


class TransactionListItem(BaseModel):
    id: int
    total_quantity: int
    total_price: Decimal
    created_at: datetime


class TransactionItemOut(BaseModel):
    book_id: int
    book_title: str
    quantity: int
    unit_price: Decimal
    subtotal_price: Decimal


class TransactionDetail(BaseModel):
    id: int
    items: List[TransactionItemOut]
    total_quantity: int
    total_price: Decimal
    created_at: datetime


class TransactionStatistics(BaseModel):
    total_transactions: int
    average_transaction_amount: Decimal
    fewest_book_sales_genre: Optional[str] = None
    most_book_sales_genre: Optional[str] = None
