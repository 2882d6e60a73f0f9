from sqlalchemy import Column, Integer, ForeignKey, Numeric, CheckConstraint
from sqlalchemy.orm import relationship

from bookshop.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    # cena z momentu zamowienia (snapshot), niezalezna od pozniejszych zmian w katalogu
    unit_price = Column(Numeric(12, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")
    book = relationship("BookModel")

    __table_args__ = (CheckConstraint("quantity > 0", name="order_items_quantity_positive"),)
