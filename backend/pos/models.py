import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


class Sale(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    table_number = models.CharField(max_length=40, blank=True, default="")
    customer_name = models.CharField(max_length=120, blank=True, default="")
    waiter_name = models.CharField(max_length=120, blank=True, default="")

    items = models.JSONField(default=list)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    discount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    # wall-clock time of the sale, moved onto the business day's date
    created_at = models.DateTimeField()
    business_day = models.DateField()
    cashier = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="sales")
    created_db_entry_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["business_day"], name="pos_sale_business_day_idx"),
            models.Index(fields=["cashier", "business_day"], name="pos_sale_cashier_day_idx"),
        ]

    def __str__(self):
        return f"Sale {self.id} ({self.business_day})"


class DeletedItemLog(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    menu_item_id = models.CharField(max_length=64, blank=True, null=True)
    item_name = models.CharField(max_length=120)
    item_code = models.CharField(max_length=40, blank=True, default="")
    quantity_removed = models.PositiveIntegerField()
    price_per_item = models.DecimalField(max_digits=12, decimal_places=2)
    removed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="deleted_item_logs"
    )
    bill_id = models.UUIDField(null=True, blank=True)
    timestamp = models.DateTimeField(default=timezone.now)
    reason = models.CharField(max_length=120, blank=True, default="")
    is_deal_item = models.BooleanField(default=False)
    deal_name = models.CharField(max_length=120, blank=True, default="")

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["timestamp"], name="pos_deleted_timestamp_idx"),
        ]

    def __str__(self):
        return f"{self.item_name} x{self.quantity_removed}"


class AppSetting(models.Model):
    setting_key = models.CharField(max_length=80, primary_key=True)
    value = models.CharField(max_length=255, blank=True, default="")
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.setting_key}={self.value}"


class BillDraft(models.Model):
    """One in-progress bill per operator; deleted when the sale is stored."""

    operator = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bill_draft"
    )
    items = models.JSONField(default=list)
    # bumped on every save; finalize claims the row at the revision it read
    revision = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"Bill draft of {self.operator_id} (rev {self.revision})"
