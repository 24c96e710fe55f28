from django.urls import path

from .views import (
    pos_bill,
    pos_bill_add_deal,
    pos_bill_add_item,
    pos_bill_finalize,
    pos_bill_item,
    pos_business_day,
    pos_business_day_advance,
    pos_cashier_reconcile,
    pos_cashier_report,
    pos_deleted_items,
    pos_deleted_items_clear,
    pos_my_sales,
    pos_reset_all,
    pos_sale_detail,
    pos_sales,
    pos_sales_clear,
    pos_sales_export,
    pos_sales_purge,
)


urlpatterns = [
    path("bill/", pos_bill, name="pos_bill"),
    path("bill/items/", pos_bill_add_item, name="pos_bill_add_item"),
    path("bill/items/<str:bill_item_id>/", pos_bill_item, name="pos_bill_item"),
    path("bill/deals/", pos_bill_add_deal, name="pos_bill_add_deal"),
    path("bill/finalize/", pos_bill_finalize, name="pos_bill_finalize"),
    path("sales/", pos_sales, name="pos_sales"),
    path("sales/mine/", pos_my_sales, name="pos_my_sales"),
    path("sales/clear/", pos_sales_clear, name="pos_sales_clear"),
    path("sales/purge/", pos_sales_purge, name="pos_sales_purge"),
    path("sales/export/", pos_sales_export, name="pos_sales_export"),
    path("sales/<uuid:sale_id>/", pos_sale_detail, name="pos_sale_detail"),
    path("deleted-items/", pos_deleted_items, name="pos_deleted_items"),
    path("deleted-items/clear/", pos_deleted_items_clear, name="pos_deleted_items_clear"),
    path("business-day/", pos_business_day, name="pos_business_day"),
    path("business-day/advance/", pos_business_day_advance, name="pos_business_day_advance"),
    path("reports/cashier/", pos_cashier_report, name="pos_cashier_report"),
    path("reports/cashier/reconcile/", pos_cashier_reconcile, name="pos_cashier_reconcile"),
    path("utilities/reset/", pos_reset_all, name="pos_reset_all"),
]
