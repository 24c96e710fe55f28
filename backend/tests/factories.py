import factory
from decimal import Decimal
from django.contrib.auth import get_user_model

from accounts.models import UserProfile
from menu.deal_items import DealItem
from menu.models import Deal, MenuItem

User = get_user_model()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "password123")

    @factory.post_generation
    def profile(self, create, extracted, **kwargs):
        if not create:
            return
        role = extracted or kwargs.get("role") or UserProfile.ROLE_CASHIER
        UserProfile.objects.create(user=self, role=role)


class CashierFactory(UserFactory):
    profile__role = UserProfile.ROLE_CASHIER


class AdminFactory(UserFactory):
    profile__role = UserProfile.ROLE_ADMIN


class MenuItemFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = MenuItem

    code = factory.Sequence(lambda n: f"M{n:03d}")
    name = factory.Sequence(lambda n: f"Menu item {n}")
    price = Decimal("250.00")
    category = "Mains"


class DealFactory(factory.django.DjangoModelFactory):
    """Pass ``components=[(menu_item, quantity, deal_price), ...]``."""

    class Meta:
        model = Deal

    deal_number = factory.Sequence(lambda n: f"D{n:03d}")
    name = factory.Sequence(lambda n: f"Deal {n}")
    description = ""
    is_active = True

    @classmethod
    def _create(cls, model_class, *args, components=None, **kwargs):
        deal = model_class(*args, **kwargs)
        if components is None:
            components = [(MenuItemFactory(), 1, Decimal("200.00"))]
        deal.set_deal_items(
            [
                DealItem(
                    menu_item_id=str(menu_item.id),
                    name=menu_item.name,
                    quantity=quantity,
                    deal_price_per_item=Decimal(str(deal_price)),
                    original_price_per_item=menu_item.price,
                )
                for menu_item, quantity, deal_price in components
            ]
        )
        deal.save()
        return deal
