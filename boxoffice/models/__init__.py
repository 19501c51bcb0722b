# boxoffice/models/__init__.py
from .user import User
from .seller import Seller
from .order import Order
from .setting import Setting

__all__ = [
    "User",
    "Seller",
    "Order",
    "Setting",
]
