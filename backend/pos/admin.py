from django.contrib import admin

from .models import AppSetting, BillDraft, DeletedItemLog, Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ("id", "business_day", "created_at", "cashier", "customer_name", "table_number", "total_amount")
    search_fields = ("id", "customer_name", "waiter_name", "table_number", "cashier__username")
    list_filter = ("business_day",)
    readonly_fields = ("items", "created_db_entry_at")


@admin.register(DeletedItemLog)
class DeletedItemLogAdmin(admin.ModelAdmin):
    list_display = ("item_name", "quantity_removed", "price_per_item", "removed_by", "reason", "timestamp")
    search_fields = ("item_name", "item_code", "deal_name")
    list_filter = ("reason", "is_deal_item")


@admin.register(AppSetting)
class AppSettingAdmin(admin.ModelAdmin):
    list_display = ("setting_key", "value", "updated_at")


@admin.register(BillDraft)
class BillDraftAdmin(admin.ModelAdmin):
    list_display = ("operator", "revision", "updated_at")
    readonly_fields = ("items",)
