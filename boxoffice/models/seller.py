# boxoffice/models/seller.py
from datetime import datetime
from boxoffice.extensions import db


class Seller(db.Model):
    __tablename__ = "sellers"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    active = db.Column(db.Boolean, nullable=False, default=True)
    # denormalized; the ranking recomputes from orders
    total_sales = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    orders = db.relationship("Order", back_populates="seller", lazy=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "active": bool(self.active),
            "total_sales": int(self.total_sales or 0),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Seller {self.name}{'' if self.active else ' (inactive)'}>"
