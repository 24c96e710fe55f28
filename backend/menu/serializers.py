import uuid

from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from .deal_items import DealItem
from .models import Deal, MenuItem


class MenuItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = MenuItem
        fields = ["id", "code", "name", "price", "category", "created_at"]
        read_only_fields = ["id", "created_at"]
        extra_kwargs = {
            "code": {
                "validators": [
                    UniqueValidator(
                        queryset=MenuItem.objects.all(),
                        message="Menu item with this code already exists.",
                    )
                ]
            },
            "category": {"required": False, "allow_null": True, "allow_blank": True},
        }

    def validate_code(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Code is required.")
        return value

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price must be a non-negative number.")
        return value

    def validate_category(self, value):
        if value is None:
            return None
        value = value.strip()
        return value or None


class DealItemInputSerializer(serializers.Serializer):
    menuItemId = serializers.CharField()
    quantity = serializers.IntegerField()
    dealPricePerItem = serializers.DecimalField(max_digits=12, decimal_places=2)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be a positive number.")
        return value

    def validate_dealPricePerItem(self, value):
        if value < 0:
            raise serializers.ValidationError("Deal price must be a non-negative number.")
        return value


class DealSerializer(serializers.ModelSerializer):
    items = DealItemInputSerializer(many=True, write_only=True)

    class Meta:
        model = Deal
        fields = [
            "id",
            "deal_number",
            "name",
            "description",
            "items",
            "calculated_total_deal_price",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "calculated_total_deal_price", "created_at", "updated_at"]
        extra_kwargs = {
            "deal_number": {
                "validators": [
                    UniqueValidator(
                        queryset=Deal.objects.all(),
                        message="Deal with this number already exists.",
                    )
                ]
            },
            "description": {"required": False, "allow_blank": True},
        }

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")

        ids = {row["menuItemId"] for row in value}
        menu_items = {str(mi.id): mi for mi in MenuItem.objects.filter(id__in=_valid_uuids(ids))}
        missing = sorted(ids - set(menu_items))
        if missing:
            raise serializers.ValidationError(f"Menu items not found: {', '.join(missing)}.")

        # same menu item twice: the later entry replaces the earlier one in place
        by_menu_item = {}
        for row in value:
            menu_item = menu_items[row["menuItemId"]]
            by_menu_item[row["menuItemId"]] = DealItem(
                menu_item_id=str(menu_item.id),
                name=menu_item.name,
                quantity=row["quantity"],
                deal_price_per_item=row["dealPricePerItem"],
                original_price_per_item=menu_item.price,
            )
        return list(by_menu_item.values())

    def create(self, validated_data):
        deal_items = validated_data.pop("items")
        deal = Deal(**validated_data)
        deal.set_deal_items(deal_items)
        deal.save()
        return deal

    def update(self, instance, validated_data):
        deal_items = validated_data.pop("items", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if deal_items is not None:
            instance.set_deal_items(deal_items)
        instance.save()
        return instance

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["items"] = instance.items
        return data


def _valid_uuids(values):
    out = []
    for value in values:
        try:
            out.append(uuid.UUID(str(value)))
        except ValueError:
            continue
    return out
