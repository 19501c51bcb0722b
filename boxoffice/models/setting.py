# boxoffice/models/setting.py
from datetime import datetime
from boxoffice.extensions import db

TICKETS_SOLD = "tickets_sold"
TICKETS_TOTAL = "tickets_total"
PIX_KEY = "pix_key"


class Setting(db.Model):
    __tablename__ = "settings"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(64), unique=True, nullable=False, index=True)
    value = db.Column(db.String(500), nullable=False, default="")
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Setting {self.key}={self.value!r}>"
