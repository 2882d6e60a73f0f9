# bookshop/api/routers/books.py
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookshop.api.deps import get_current_user
from bookshop.data.database import get_db
from bookshop.domain.schemas import ApiResponse, BookCreate, BookList, BookOut, BookUpdate, GenreBookList
from bookshop.services.book_service import BookService

router = APIRouter(prefix="/books", tags=["books"])

SortBy = Literal["created_at", "title", "price", "publication_year", "stock_quantity"]
SortOrder = Literal["asc", "desc"]


def get_service(db: Session):
    return BookService(db)


@router.post("", response_model=ApiResponse[BookOut], status_code=201, dependencies=[Depends(get_current_user)])
def create_book(payload: BookCreate, db: Session = Depends(get_db)):
    svc = get_service(db)
    return {"message": "Book created successfully", "data": svc.create_book(payload)}


@router.get("", response_model=ApiResponse[BookList])
def list_books(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    search: str | None = None,
    genre_id: int | None = None,
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    sort_by: SortBy = "created_at",
    sort_order: SortOrder = "desc",
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    books = svc.list_books(
        search=search,
        genre_id=genre_id,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return {"message": "Books retrieved successfully", "data": books}


@router.get("/genre/{genre_id}", response_model=ApiResponse[GenreBookList])
def list_books_by_genre(
    genre_id: int,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    search: str | None = None,
    sort_by: SortBy = "created_at",
    sort_order: SortOrder = "desc",
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    books = svc.list_books_by_genre(
        genre_id,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return {"message": "Books by genre retrieved successfully", "data": books}


@router.get("/{book_id}", response_model=ApiResponse[BookOut])
def get_book(book_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    return {"message": "Book detail retrieved successfully", "data": svc.get_book(book_id)}


@router.patch("/{book_id}", response_model=ApiResponse[BookOut], dependencies=[Depends(get_current_user)])
def update_book(book_id: int, payload: BookUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    return {"message": "Book updated successfully", "data": svc.update_book(book_id, payload)}


@router.delete("/{book_id}", response_model=ApiResponse[None], dependencies=[Depends(get_current_user)])
def delete_book(book_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    svc.delete_book(book_id)
    return {"message": "Book deleted successfully"}
