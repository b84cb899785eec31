"""
Payza IPN (v2) handling.

Payza posts an opaque ``token`` to our alert URL. We post the token back to
Payza, which answers with the transaction details as ``key=value`` pairs
joined by ``&``. Those details are checked against the order before the
order is completed.

References:
 https://dev.payza.com/integration-tools/html-integration/ipn-guide-v2
 https://dev.payza.com/integration-tools/html-integration/integration-best-practices
 https://dev.payza.com/resources/references/ipn-security
 https://dev.payza.com/resources/references/ipn-variables
"""
import enum
import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

import requests

from .conf import GatewayConfig
from .exceptions import (
    AlreadyReconciled, AmountMismatch, ConfigurationError, EmptyExchangeResponse,
    ExchangeError, ExchangeTimeout, ExchangeTransportError, FeeReconciliationMismatch,
    InvalidTokenResponse, MalformedToken, MerchantMismatch, OrderKeyMismatch,
    OrderNotFound, PayloadDecodeError, PayzaError, ReconciliationError, StatusMismatch,
)
from .store import DjangoOrderStore

log = logging.getLogger(__name__)

EXCHANGE_TIMEOUT = 60
SUCCESS_STATUS = "Success"
INVALID_TOKEN = "INVALID TOKEN"
REFERENCE_META_KEY = "referencenumber"
# order totals are DecimalField(max_digits=12); anything far beyond is junk
MAX_AMOUNT_DIGITS = 15

# Payza tokens are long url-safe strings; anything with whitespace or control
# characters did not come from Payza.
_TOKEN_RE = re.compile(r"[A-Za-z0-9+/=_\-.%]{1,2048}\Z")


# ===== payload =====
@dataclass(frozen=True)
class IPNPayload:
    status: str
    order_id: int
    order_key: str = ""
    total_amount: Optional[Decimal] = None
    net_amount: Optional[Decimal] = None
    fee_amount: Optional[Decimal] = None
    reference_number: str = ""
    merchant: str = ""
    test: bool = False
    raw: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)


def _amount(fields: Dict[str, str], name: str) -> Optional[Decimal]:
    value = fields.get(name, "")
    if value == "":
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise PayloadDecodeError(f"{name} is not a number: {value!r}") from None
    if not amount.is_finite():
        raise PayloadDecodeError(f"{name} is not a number: {value!r}")
    if amount.adjusted() > MAX_AMOUNT_DIGITS or amount.adjusted() < -MAX_AMOUNT_DIGITS:
        raise PayloadDecodeError(f"{name} is out of range: {value!r}")
    return amount


def _truthy(value: Optional[str]) -> bool:
    return value not in (None, "", "0")


def parse_pairs(body: str) -> Dict[str, str]:
    """Split ``a=1&b=2`` into a dict. Values are not url-decoded."""
    fields: Dict[str, str] = {}
    for pair in body.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        fields[key] = value
    return fields


def decode_payload(body: str) -> IPNPayload:
    fields = parse_pairs(body)
    for required in ("ap_status", "apc_1"):
        if not fields.get(required):
            raise PayloadDecodeError(f"IPN response is missing {required}")
    if not (fields["apc_1"].isascii() and fields["apc_1"].isdigit()):
        raise PayloadDecodeError(f"apc_1 is not an order id: {fields['apc_1']!r}")
    order_id = int(fields["apc_1"])

    return IPNPayload(
        status=fields["ap_status"],
        order_id=order_id,
        order_key=fields.get("apc_2", ""),
        total_amount=_amount(fields, "ap_totalamount"),
        net_amount=_amount(fields, "ap_netamount"),
        fee_amount=_amount(fields, "ap_feeamount"),
        reference_number=fields.get("ap_referencenumber", ""),
        merchant=fields.get("ap_merchant", ""),
        test=_truthy(fields.get("ap_test")),
        raw=fields,
    )


def to_cents(amount) -> int:
    """Whole cents, truncated toward zero (19.995 -> 1999, never rounded)."""
    return int(Decimal(str(amount)) * 100)


# ===== exchange =====
def exchange_token(config: GatewayConfig, token: str, session=None) -> str:
    http = session or requests
    try:
        r = http.post(
            config.ipn_exchange_url,
            data={"token": token},
            allow_redirects=False,
            timeout=EXCHANGE_TIMEOUT,
        )
    except requests.Timeout as ex:
        raise ExchangeTimeout(f"Payza IPN exchange timed out: {ex}") from ex
    except requests.RequestException as ex:
        raise ExchangeTransportError(f"Cannot reach Payza: {ex}") from ex

    if not 200 <= r.status_code < 300:
        raise ExchangeTransportError(f"Payza IPN exchange failed with HTTP {r.status_code}")

    body = (r.text or "").strip()
    if not body:
        raise EmptyExchangeResponse("Empty IPN response from Payza")
    return body


# ===== reconciliation =====
class Outcome(str, enum.Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    IGNORED = "ignored"
    DROPPED = "dropped"


@dataclass
class ReconcileResult:
    outcome: Outcome
    order_id: Optional[int] = None
    error: Optional[PayzaError] = None


class IPNReconciler:
    def __init__(self, config: GatewayConfig, store=None, session=None):
        self.config = config
        self.store = store or DjangoOrderStore()
        self.session = session

    def _debug(self, msg, *args):
        if self.config.debug:
            log.info(msg, *args)

    def reconcile(self, token) -> ReconcileResult:
        """Settle the order named by the notification; never raises PayzaError."""
        self._debug("IPN token received: %s", token)
        try:
            payload = self.fetch(token)
        except ExchangeError as ex:
            log.warning("Payza IPN dropped: %s", ex)
            return ReconcileResult(Outcome.DROPPED, error=ex)
        except PayzaError as ex:
            self._debug("Payza IPN dropped: %s", ex)
            return ReconcileResult(Outcome.DROPPED, error=ex)

        try:
            with self.store.atomic():
                return self.apply(payload)
        except (OrderNotFound, ConfigurationError) as ex:
            self._debug("Error: %s", ex)
            return ReconcileResult(Outcome.DROPPED, order_id=payload.order_id, error=ex)

    def fetch(self, token) -> IPNPayload:
        if not isinstance(token, str) or not _TOKEN_RE.fullmatch(token):
            raise MalformedToken(f"Malformed IPN token: {token!r}")

        self._debug("Posting IPN token back: %s", token)
        body = exchange_token(self.config, token, session=self.session)

        if body == INVALID_TOKEN:
            raise InvalidTokenResponse("Error: invalid token IPN response from Payza")
        self._debug("IPN response: %s", body)
        return decode_payload(body)

    def apply(self, payload: IPNPayload) -> ReconcileResult:
        order = self.store.find(payload.order_id)
        if payload.order_key and payload.order_key != order.order_key:
            raise OrderKeyMismatch(payload.order_id)
        if payload.merchant and payload.merchant != self.config.merchant_email:
            raise MerchantMismatch(
                f"IPN merchant {payload.merchant} is not the configured "
                f"{self.config.environment.value} merchant"
            )

        if self.store.is_paid(order):
            ex = AlreadyReconciled(f"Order {order.pk} is already paid")
            self._debug("%s", ex)
            return ReconcileResult(Outcome.IGNORED, order_id=order.pk, error=ex)

        try:
            self.validate(payload, order)
        except ReconciliationError as ex:
            self._debug("Error: %s", ex.note)
            self.store.mark_failed(order, ex.note)
            return ReconcileResult(Outcome.FAILED, order_id=order.pk, error=ex)

        if not self.store.needs_payment(order):
            ex = AlreadyReconciled(f"Order {order.pk} does not need payment")
            self._debug("%s", ex)
            return ReconcileResult(Outcome.IGNORED, order_id=order.pk, error=ex)

        self.store.mark_completed(order, transaction_id=payload.reference_number)
        self.store.append_note(
            order, "Test Mode Payza payment completed" if payload.test else "Payza payment completed"
        )
        self.store.set_metadata(order, REFERENCE_META_KEY, payload.reference_number)
        return ReconcileResult(Outcome.COMPLETED, order_id=order.pk)

    def validate(self, payload: IPNPayload, order):
        if payload.status != SUCCESS_STATUS:
            raise StatusMismatch(f"Payza payment failed (IPN Status: {payload.status})")

        # per the best practices doc, compare order totals
        total = payload.total_amount
        if total is None or to_cents(total) != to_cents(order.total):
            raise AmountMismatch(
                f"Payza payment failed (IPN total amount {payload.raw.get('ap_totalamount', '')} "
                f"does not equal order total {order.total})"
            )

        # total = net received + Payza fee; a forged IPN under-reporting the
        # fee would look like an unauthorized discount. Not applicable to test mode.
        if not payload.test:
            net = payload.net_amount or Decimal(0)
            fee = payload.fee_amount or Decimal(0)
            if payload.net_amount is None or to_cents(total) != to_cents(net + fee):
                raise FeeReconciliationMismatch(
                    "Payza payment failed. Possible fraudulent discount (IPN total amount "
                    f"{payload.raw.get('ap_totalamount', '')} not equal to net amount "
                    f"{payload.raw.get('ap_netamount', '')} + fee amount "
                    f"{payload.raw.get('ap_feeamount', '')})"
                )
