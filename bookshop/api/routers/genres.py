# bookshop/api/routers/genres.py
from typing import List, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookshop.api.deps import get_current_user
from bookshop.data.database import get_db
from bookshop.domain.schemas import ApiResponse, GenreCreate, GenreOut, GenreRef, GenreUpdate
from bookshop.services.genre_service import GenreService

router = APIRouter(prefix="/genre", tags=["genres"])


def get_service(db: Session):
    return GenreService(db)


@router.post("", response_model=ApiResponse[GenreOut], status_code=201, dependencies=[Depends(get_current_user)])
def create_genre(payload: GenreCreate, db: Session = Depends(get_db)):
    svc = get_service(db)
    return {"message": "Genre created successfully", "data": svc.create_genre(payload.name)}


@router.get("", response_model=ApiResponse[List[GenreRef]])
def list_genres(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    search: str | None = None,
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    genres, meta = svc.list_genres(search=search, sort_order=sort_order, page=page, limit=limit)
    return {"message": "Get all genre successfully", "data": genres, "meta": meta}


@router.get("/{genre_id}", response_model=ApiResponse[GenreRef])
def get_genre(genre_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    return {"message": "Get genre detail successfully", "data": svc.get_genre(genre_id)}


@router.patch("/{genre_id}", response_model=ApiResponse[GenreOut], dependencies=[Depends(get_current_user)])
def update_genre(genre_id: int, payload: GenreUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    return {"message": "Genre updated successfully", "data": svc.update_genre(genre_id, payload.name)}


@router.delete("/{genre_id}", response_model=ApiResponse[None], dependencies=[Depends(get_current_user)])
def delete_genre(genre_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    svc.delete_genre(genre_id)
    return {"message": "Genre removed successfully"}
