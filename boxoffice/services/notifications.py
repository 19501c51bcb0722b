# boxoffice/services/notifications.py
from flask import current_app
from flask_mail import Message

from boxoffice.extensions import mail


def send_email(subject, recipients, body, sender=None):
    """Plain UTF-8 text e-mail through Flask-Mail."""
    if isinstance(recipients, str):
        recipients = [recipients]

    msg = Message(
        subject=subject or "",
        recipients=list(recipients or []),
        body=body or "",
        sender=sender,
    )
    msg.charset = "utf-8"
    mail.send(msg)
    return msg


def notify_new_order(order) -> bool:
    """
    Tell the organizer a receipt is waiting for review.
    Returns False when ORDER_NOTIFY_EMAIL is not configured or sending failed;
    the order itself is already committed at this point.
    """
    owner = current_app.config.get("ORDER_NOTIFY_EMAIL")
    if not owner:
        return False
    try:
        send_email(
            subject=f"Novo pedido {order.order_code}",
            recipients=[owner],
            body=(
                f"Pedido {order.order_code}\n"
                f"Cliente: {order.customer_name} ({order.customer_whatsapp})\n"
                f"Produto: {order.product_name}\n"
                f"Valor: R$ {order.price:.2f}\n"
                f"Comprovante: {order.receipt_url}\n"
            ),
        )
        return True
    except Exception:
        current_app.logger.exception("Owner e-mail failed for %s", order.order_code)
        return False
