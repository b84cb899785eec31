"""
Errors raised while building Payza requests and reconciling IPN callbacks.

Everything raised inside the reconciler stops the current notification
only; ``IPNReconciler.reconcile`` turns it into an ``Outcome``.
"""


class PayzaError(Exception):
    """Base class for every error raised by this app."""


class ConfigurationError(PayzaError):
    """Gateway settings are missing or inconsistent."""


class MerchantMismatch(ConfigurationError):
    """The IPN was addressed to a merchant other than the configured one."""


class MalformedToken(PayzaError):
    """Inbound IPN token is empty or not a plausible token."""


class ExchangeError(PayzaError):
    """The token could not be exchanged for transaction details."""


class ExchangeTimeout(ExchangeError):
    pass


class ExchangeTransportError(ExchangeError):
    pass


class EmptyExchangeResponse(ExchangeError):
    pass


class InvalidTokenResponse(PayzaError):
    """Payza answered the exchange with ``INVALID TOKEN``."""


class PayloadDecodeError(PayzaError):
    """The exchanged payload is missing a field or carries a bad value."""


class OrderNotFound(PayzaError):
    def __init__(self, order_id):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class OrderKeyMismatch(OrderNotFound):
    def __init__(self, order_id):
        PayzaError.__init__(self, f"Order key mismatch for order {order_id}")
        self.order_id = order_id


class ReconciliationError(PayzaError):
    """The transaction does not match the order; the order gets marked failed.

    ``note`` is the text appended to the order.
    """

    def __init__(self, note):
        super().__init__(note)
        self.note = note


class StatusMismatch(ReconciliationError):
    pass


class AmountMismatch(ReconciliationError):
    pass


class FeeReconciliationMismatch(ReconciliationError):
    pass


class AlreadyReconciled(PayzaError):
    """The order no longer needs payment; nothing to do."""
