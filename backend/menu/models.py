import uuid

from django.db import models
from django.utils import timezone

from .deal_items import deal_items_from_blob, deal_items_to_blob, deal_total


class MenuItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=40, unique=True)
    name = models.CharField(max_length=120)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    category = models.CharField(max_length=80, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.code} - {self.name}"


class Deal(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    deal_number = models.CharField(max_length=40, unique=True)
    name = models.CharField(max_length=120)
    description = models.TextField(blank=True, default="")
    items = models.JSONField(default=list)
    # always the sum of dealPricePerItem x quantity over items, see save()
    calculated_total_deal_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active"], name="menu_deal_active_idx"),
        ]

    def __str__(self):
        return f"{self.deal_number} - {self.name}"

    @property
    def deal_items(self):
        return deal_items_from_blob(self.items)

    def set_deal_items(self, deal_items):
        if not deal_items:
            raise ValueError("A deal needs at least one item.")
        self.items = deal_items_to_blob(deal_items)
        self.calculated_total_deal_price = deal_total(deal_items)

    def save(self, *args, **kwargs):
        deal_items = self.deal_items
        if not deal_items:
            raise ValueError("A deal needs at least one item.")
        self.calculated_total_deal_price = deal_total(deal_items)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "items" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"calculated_total_deal_price"}
        super().save(*args, **kwargs)
