"""
Builds the parameters for the Payza hosted payment page.

References:
 https://dev.payza.com/resources/references/payza-button-parameters
 https://dev.payza.com/integration-tools/html-integration/multi-item-button
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

from django.utils.html import format_html, format_html_join
from django.utils.safestring import mark_safe

from .conf import GatewayConfig

log = logging.getLogger(__name__)

IPN_VERSION = "2"
CENT = Decimal("0.01")


def format_amount(value: Any) -> str:
    """Two decimals, '.' separator, no grouping; independent of locale."""
    amount = Decimal(str(value if value not in (None, "") else 0))
    return "{:.2f}".format(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def item_params(order) -> Dict[str, str]:
    # Payza numbers items ap_itemname, ap_itemname_1, ap_itemname_2, ...
    params: Dict[str, str] = {}
    index = 0
    for item in order.items.all():
        if item.quantity <= 0:
            continue
        suffix = f"_{index}" if index else ""
        params["ap_itemname" + suffix] = item.name
        params["ap_amount" + suffix] = format_amount(item.unit_price)
        if item.description:
            params["ap_description" + suffix] = item.description
        if item.sku:
            params["ap_itemcode" + suffix] = item.sku
        params["ap_quantity" + suffix] = str(item.quantity)
        index += 1
    return params


class CheckoutRequestBuilder:
    def __init__(self, config: GatewayConfig):
        self.config = config

    def build(self, order, return_url: str, cancel_url: str,
              alert_url: Optional[str] = None) -> Dict[str, str]:
        config = self.config
        params = {
            "ap_purchasetype": "item",
            "ap_merchant": config.merchant_email,
            "ap_currency": order.currency,
            "ap_returnurl": return_url,
            "ap_cancelurl": cancel_url,
            "ap_fname": order.first_name,
            "ap_lname": order.last_name,
            "ap_addressline1": order.address_1,
            "ap_addressline2": order.address_2,
            "ap_city": order.city,
            "ap_stateprovince": order.state,
            "ap_zippostalcode": order.postcode,
            "ap_country": order.country,
            "ap_contactemail": order.email,
            "ap_contactphone": order.phone,
            # echoed back in the IPN
            "apc_1": str(order.pk),
            "apc_2": order.order_key,
        }

        # Payza asks that the alert URL never travel with live buttons; live
        # merchants register it in their account instead.
        if config.is_sandbox:
            params["ap_ipnversion"] = IPN_VERSION
            params["ap_alerturl"] = alert_url or config.alert_url

        params["ap_additionalcharges"] = format_amount(0)
        params["ap_shippingcharges"] = format_amount(order.shipping_total)
        params["ap_taxamount"] = format_amount(order.tax_total)
        params["ap_discountamount"] = format_amount(0)
        params.update(item_params(order))

        params = {k: "" if v is None else str(v) for k, v in params.items()}
        if config.debug:
            log.info("Payza checkout request for order %s: %s", order.pk, sorted(params))
        return params


_AUTO_SUBMIT_JS = mark_safe(
    "document.addEventListener('DOMContentLoaded',function(){"
    "document.getElementById('submit_payza_payment_form').click();});"
)


def render_payment_form(action_url: str, params: Dict[str, str], cancel_url: str,
                        button_label: str = "Pay via Payza") -> str:
    inputs = format_html_join(
        "", '<input type="hidden" name="{}" value="{}" />', params.items()
    )
    return format_html(
        '<form action="{}" method="post" id="payza_payment_form">{}'
        '<input type="submit" class="button-alt" id="submit_payza_payment_form" value="{}" />'
        '<a class="button cancel" href="{}">{}</a>'
        "</form><script>{}</script>",
        action_url, inputs, button_label, cancel_url, "Cancel order & restore cart", _AUTO_SUBMIT_JS,
    )
