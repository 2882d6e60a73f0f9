# bookshop/data/seed.py
from decimal import Decimal

from bookshop.data.database import Base, SessionLocal, engine
from bookshop.data.models import BookModel, GenreModel, UserModel
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)

GENRES = ["Programming", "Networking", "Security"]

BOOKS = [
    ("Clean Code", "Robert C. Martin", "Prentice Hall", 2008, "19.99", 10, "Programming"),
    ("The Pragmatic Programmer", "Andrew Hunt", "Addison-Wesley", 1999, "24.50", 5, "Programming"),
    ("Computer Networking", "James Kurose", "Pearson", 2016, "59.00", 3, "Networking"),
    ("The Web Application Hacker's Handbook", "Dafydd Stuttard", "Wiley", 2011, "39.90", 1, "Security"),
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # seed tylko gdy baza pusta
        if db.query(GenreModel).first():
            return
        genres = {name: GenreModel(name=name) for name in GENRES}
        db.add_all(genres.values())
        db.flush()

        for title, writer, publisher, year, price, stock, genre in BOOKS:
            db.add(
                BookModel(
                    title=title,
                    writer=writer,
                    publisher=publisher,
                    publication_year=year,
                    price=Decimal(price),
                    stock_quantity=stock,
                    genre_id=genres[genre].id,
                )
            )
        db.add(UserModel(email="demo@bookshop.local", username="demo"))
        db.commit()
        logger.info(f"Seeded {len(GENRES)} genres and {len(BOOKS)} books")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
