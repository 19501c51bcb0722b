from flask import Blueprint

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

from . import routes            # dashboard + pedidos  # noqa: E402,F401
from . import checkin_routes    # check-in na portaria  # noqa: E402,F401
from . import ranking_routes    # ranking de vendedores  # noqa: E402,F401
