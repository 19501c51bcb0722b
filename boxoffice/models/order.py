# boxoffice/models/order.py
import uuid
from datetime import datetime

from boxoffice.extensions import db

STATUS_PENDING = "pending"
STATUS_PAID = "paid"
STATUS_CANCELLED = "cancelled"
STATUS_USED = "used"

STATUSES = (STATUS_PENDING, STATUS_PAID, STATUS_CANCELLED, STATUS_USED)


def _new_id() -> str:
    return uuid.uuid4().hex


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    order_code = db.Column(db.String(32), unique=True, index=True, nullable=False)

    # customer
    customer_name = db.Column(db.String(120), nullable=False)
    customer_whatsapp = db.Column(db.String(20), nullable=False)

    seller_id = db.Column(db.Integer, db.ForeignKey("sellers.id"), nullable=True)
    seller = db.relationship("Seller", back_populates="orders")

    # product as it was at checkout
    product_type = db.Column(db.String(50), nullable=False)
    product_name = db.Column(db.String(150), nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(16), nullable=False, default=STATUS_PAID, index=True)
    receipt_url = db.Column(db.String(500), nullable=True)
    used_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def is_valid_ticket(self) -> bool:
        return self.status in (STATUS_PAID, STATUS_USED)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_code": self.order_code,
            "customer_name": self.customer_name,
            "customer_whatsapp": self.customer_whatsapp,
            "seller_id": self.seller_id,
            "product_type": self.product_type,
            "product_name": self.product_name,
            "price": float(self.price) if self.price is not None else None,
            "status": self.status,
            "receipt_url": self.receipt_url,
            "used_at": self.used_at.isoformat() if self.used_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Order {self.order_code} {self.customer_name} ({self.status})>"
