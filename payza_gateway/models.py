# payza_gateway/models.py
from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string


def _new_order_key():
    return "order_" + get_random_string(13)


class Order(models.Model):
    class Status(models.TextChoices):
        PENDING    = "pending"
        PROCESSING = "processing"
        FAILED     = "failed"
        COMPLETED  = "completed"
        CANCELLED  = "cancelled"

    # statuses from which the shopper may (re)try paying
    PAYABLE_STATUSES = (Status.PENDING, Status.FAILED)
    PAID_STATUSES = (Status.PROCESSING, Status.COMPLETED)

    order_key = models.CharField(max_length=64, unique=True, default=_new_order_key, editable=False)
    currency = models.CharField(max_length=8, default="USD")
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    tax_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    shipping_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)

    first_name = models.CharField(max_length=128, blank=True)
    last_name = models.CharField(max_length=128, blank=True)
    address_1 = models.CharField(max_length=255, blank=True)
    address_2 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=128, blank=True)
    state = models.CharField(max_length=128, blank=True)
    postcode = models.CharField(max_length=32, blank=True)
    country = models.CharField(max_length=2, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=64, blank=True)

    transaction_id = models.CharField(max_length=128, blank=True)
    date_paid = models.DateTimeField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=["status", "created_at"], name="payza_order_status_idx")]
        ordering = ["-created_at"]

    def __str__(self):
        return f"#{self.pk} - {self.total} {self.currency} - {self.status}"

    def needs_payment(self):
        return self.status in self.PAYABLE_STATUSES and self.total > 0

    def is_paid(self):
        return self.status in self.PAID_STATUSES

    def add_note(self, text):
        return OrderNote.objects.create(order=self, note=text)

    def update_status(self, status, note=""):
        previous = self.status
        self.status = status
        self.save(update_fields=["status", "updated_at"])
        if previous != status or note:
            prefix = f"Order status changed from {previous} to {status}."
            self.add_note(f"{note} {prefix}".strip() if note else prefix)

    def payment_complete(self, transaction_id=""):
        if self.status == self.Status.COMPLETED:
            return
        self.status = self.Status.COMPLETED
        self.date_paid = timezone.now()
        if transaction_id:
            self.transaction_id = transaction_id
        self.save(update_fields=["status", "date_paid", "transaction_id", "updated_at"])

    def set_meta(self, key, value):
        self.metadata = {**(self.metadata or {}), key: value}
        self.save(update_fields=["metadata", "updated_at"])


class OrderItem(models.Model):
    order = models.ForeignKey(Order, related_name="items", on_delete=models.CASCADE)
    name = models.CharField(max_length=255)
    quantity = models.IntegerField(default=1)
    # excludes tax and shipping
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    sku = models.CharField(max_length=64, blank=True)
    description = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} x {self.quantity}"


class OrderNote(models.Model):
    order = models.ForeignKey(Order, related_name="notes", on_delete=models.CASCADE)
    note = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.note
