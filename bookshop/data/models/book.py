# bookshop/data/models/book.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from bookshop.data.database import Base


class BookModel(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False, unique=True)
    writer = Column(String(255), nullable=False)
    publisher = Column(String(255), nullable=False)
    publication_year = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)

    price = Column(Numeric(12, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    genre_id = Column(Integer, ForeignKey("genres.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    # soft delete - ksiazka niewidoczna dla nowych zamowien i list
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    genre = relationship("GenreModel", back_populates="books")

    __table_args__ = (
        CheckConstraint("price > 0", name="books_price_positive"),
        CheckConstraint("stock_quantity >= 0", name="books_stock_nonneg"),
    )
