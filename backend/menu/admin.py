from django.contrib import admin

from .models import Deal, MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "price", "category", "created_at")
    search_fields = ("code", "name", "category")
    list_filter = ("category",)


@admin.register(Deal)
class DealAdmin(admin.ModelAdmin):
    list_display = ("deal_number", "name", "calculated_total_deal_price", "is_active", "updated_at")
    search_fields = ("deal_number", "name")
    list_filter = ("is_active",)
    readonly_fields = ("calculated_total_deal_price",)
