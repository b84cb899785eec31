from django.db import transaction

from .exceptions import OrderNotFound
from .models import Order


class DjangoOrderStore:
    """Order persistence used by the IPN reconciler.

    The database is relied upon to serialize updates to one order: ``find``
    takes a row lock when called inside ``atomic()``.
    """

    def atomic(self):
        return transaction.atomic()

    def find(self, order_id) -> Order:
        qs = Order.objects.all()
        if transaction.get_connection().in_atomic_block:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise OrderNotFound(order_id) from None

    def needs_payment(self, order: Order) -> bool:
        return order.needs_payment()

    def is_paid(self, order: Order) -> bool:
        return order.is_paid()

    def mark_failed(self, order: Order, reason: str):
        order.update_status(Order.Status.FAILED, reason)

    def mark_completed(self, order: Order, transaction_id: str = ""):
        order.payment_complete(transaction_id=transaction_id)

    def append_note(self, order: Order, text: str):
        order.add_note(text)

    def set_metadata(self, order: Order, key: str, value):
        order.set_meta(key, value)
