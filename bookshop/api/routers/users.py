from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from bookshop.api.deps import get_current_user
from bookshop.data.database import get_db
from bookshop.services.user_service import UserService
from bookshop.domain.schemas import ApiResponse, UserCreate, UserRead

router = APIRouter(prefix="/users", tags=["users"])

@router.post("", response_model=ApiResponse[UserRead], status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    return {"message": "User registered successfully", "data": service.create_user(payload)}

@router.get("/me", response_model=ApiResponse[UserRead])
def get_me(user: UserRead = Depends(get_current_user)):
    return {"message": "Get me successfully", "data": user}

@router.get("/{user_id}", response_model=ApiResponse[UserRead])
def get_user(user_id: int, db: Session = Depends(get_db)):
    service = UserService(db)
    return {"message": "User retrieved successfully", "data": service.get_user(user_id)}
