from rest_framework import serializers

from accounts.utils import display_name_for

from .models import DeletedItemLog, Sale


class BillAddItemSerializer(serializers.Serializer):
    menu_item_id = serializers.UUIDField()


class BillAddDealSerializer(serializers.Serializer):
    deal_id = serializers.UUIDField()


class BillQuantitySerializer(serializers.Serializer):
    # zero or below removes the line
    quantity = serializers.IntegerField()


class FinalizeSaleSerializer(serializers.Serializer):
    table_number = serializers.CharField(required=False, allow_blank=True, default="", max_length=40)
    customer_name = serializers.CharField(required=False, allow_blank=True, default="", max_length=120)
    waiter_name = serializers.CharField(required=False, allow_blank=True, default="", max_length=120)
    cashier_id = serializers.IntegerField(required=False, allow_null=True)


class DeletedItemCreateSerializer(serializers.Serializer):
    removed_by_cashier_id = serializers.IntegerField()
    item_name = serializers.CharField(max_length=120)
    item_code = serializers.CharField(required=False, allow_blank=True, default="", max_length=40)
    menu_item_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    quantity_removed = serializers.IntegerField()
    price_per_item = serializers.DecimalField(max_digits=12, decimal_places=2)
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=120)
    bill_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    is_deal_item = serializers.BooleanField(required=False, default=False)
    deal_name = serializers.CharField(required=False, allow_blank=True, default="", max_length=120)

    def validate_quantity_removed(self, value):
        if value < 1:
            raise serializers.ValidationError("Quantity removed must be at least 1.")
        return value

    def validate_price_per_item(self, value):
        if value < 0:
            raise serializers.ValidationError("Price must be a non-negative number.")
        return value


class DeletedItemLogSerializer(serializers.ModelSerializer):
    removed_by_cashier_id = serializers.IntegerField(source="removed_by_id", read_only=True)
    removed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = DeletedItemLog
        fields = [
            "id",
            "menu_item_id",
            "item_name",
            "item_code",
            "quantity_removed",
            "price_per_item",
            "removed_by_cashier_id",
            "removed_by_name",
            "bill_id",
            "timestamp",
            "reason",
            "is_deal_item",
            "deal_name",
        ]
        read_only_fields = fields

    def get_removed_by_name(self, obj):
        return display_name_for(obj.removed_by)


class SaleSerializer(serializers.ModelSerializer):
    cashier_id = serializers.IntegerField(read_only=True)
    cashier_name = serializers.SerializerMethodField()

    class Meta:
        model = Sale
        fields = [
            "id",
            "table_number",
            "customer_name",
            "waiter_name",
            "items",
            "subtotal",
            "tax",
            "discount",
            "total_amount",
            "created_at",
            "business_day",
            "cashier_id",
            "cashier_name",
            "created_db_entry_at",
        ]
        read_only_fields = fields

    def get_cashier_name(self, obj):
        return display_name_for(obj.cashier)


class PurgeSalesSerializer(serializers.Serializer):
    # checked as a business day by the service, not by DRF's DateField
    before = serializers.CharField()
