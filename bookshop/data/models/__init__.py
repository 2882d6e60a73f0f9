#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from bookshop.data.models.user import UserModel
from bookshop.data.models.genre import GenreModel
from bookshop.data.models.book import BookModel
from bookshop.data.models.order import OrderModel
from bookshop.data.models.order_item import OrderItemModel

__all__ = ["UserModel", "GenreModel", "BookModel", "OrderModel", "OrderItemModel"]
