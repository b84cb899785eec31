# payza_gateway/views.py
import logging

from django.http import (
    Http404, HttpResponse, HttpResponseBadRequest, HttpResponseNotAllowed
)
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.utils.crypto import constant_time_compare
from django.utils.html import format_html
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET

from .checkout import CheckoutRequestBuilder, render_payment_form
from .conf import is_available, load_config
from .exceptions import ConfigurationError
from .ipn import IPNReconciler
from .models import Order

log = logging.getLogger(__name__)


# ===== helpers =====
def _order_for_key(request, order_id: int) -> Order:
    order = get_object_or_404(Order, pk=order_id)
    if not constant_time_compare(request.GET.get("key", ""), order.order_key):
        raise Http404("Order not found")
    return order


def _order_url(request, name: str, order: Order) -> str:
    path = reverse(f"payza_gateway:{name}", kwargs={"order_id": order.pk})
    return request.build_absolute_uri(f"{path}?key={order.order_key}")


def _alert_url(request, config) -> str:
    return config.alert_url or request.build_absolute_uri(reverse("payza_gateway:ipn"))


# ===== Endpoints: shopper =====
@require_GET
def payment_page(request, order_id: int):
    order = _order_for_key(request, order_id)
    config = load_config()
    if not is_available(config, order.currency):
        return HttpResponseBadRequest("Payza is not available for this order")
    if not order.needs_payment():
        return HttpResponseBadRequest("This order does not need payment")

    cancel_url = _order_url(request, "cancel_order", order)
    try:
        params = CheckoutRequestBuilder(config).build(
            order,
            return_url=_order_url(request, "return_page", order),
            cancel_url=cancel_url,
            alert_url=_alert_url(request, config),
        )
    except ConfigurationError:
        return HttpResponseBadRequest("Payment settings not configured")

    form = render_payment_form(config.checkout_url, params, cancel_url,
                               button_label=f"Pay via {config.title}")
    return HttpResponse(format_html(
        "<p>{}</p><p>{}</p>{}",
        config.display_description,
        f"Thank you for your order, please click the button below to pay with {config.title}.",
        form,
    ))


@require_GET
def return_page(request, order_id: int):
    order = _order_for_key(request, order_id)
    if order.status in (Order.Status.COMPLETED, Order.Status.PROCESSING):
        msg = "Payment received. Thank you for your order."
    elif order.status in (Order.Status.FAILED, Order.Status.CANCELLED):
        msg = "The payment did not go through or was cancelled."
    else:
        msg = "Your payment is being processed. Please reload this page in a few minutes."
    return HttpResponse(msg)


@require_GET
def cancel_order(request, order_id: int):
    order = _order_for_key(request, order_id)
    if order.needs_payment():
        order.update_status(Order.Status.CANCELLED, "Order cancelled by customer.")
        return HttpResponse("Your order was cancelled.")
    return HttpResponse("This order can no longer be cancelled.")


# ===== Endpoint: Payza IPN (server-to-server) =====
@csrf_exempt
def ipn(request):
    if request.method != "POST":
        return HttpResponseNotAllowed(["POST"])
    try:
        config = load_config()
    except ConfigurationError as ex:
        log.error("Payza IPN ignored, gateway misconfigured: %s", ex)
    else:
        if not config.ipn_ready:
            log.warning("Payza is live but the IPN alert URL is not certified as configured")
        try:
            IPNReconciler(config).reconcile(request.POST.get("token", ""))
        except Exception:
            log.exception("Unexpected error while processing Payza IPN")
    # always 200 so Payza stops retrying; failures are recorded on the order
    return HttpResponse(status=200)
