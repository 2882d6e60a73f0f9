from sqlalchemy.orm import Session
from bookshop.data.models.user import UserModel
from bookshop.domain.errors import UserNotFound
from bookshop.repos.user_repo import UserRepo
from bookshop.domain.schemas import UserCreate, UserRead


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user_by_email(payload.email)
        if existing:
            return UserRead.model_validate(existing)

        user = UserModel(email=payload.email, username=payload.username)
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)
        return UserRead.model_validate(user)
