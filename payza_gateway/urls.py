from django.urls import path
from . import views

app_name = "payza_gateway"

urlpatterns = [
    # Payza calls this (IPN alert URL)
    path("ipn/", views.ipn, name="ipn"),

    # shopper-facing pages
    path("pay/<int:order_id>/", views.payment_page, name="payment_page"),
    path("return/<int:order_id>/", views.return_page, name="return_page"),
    path("cancel/<int:order_id>/", views.cancel_order, name="cancel_order"),
]
