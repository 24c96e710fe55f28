from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AppSetting",
            fields=[
                ("setting_key", models.CharField(max_length=80, primary_key=True, serialize=False)),
                ("value", models.CharField(blank=True, default="", max_length=255)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
        ),
        migrations.CreateModel(
            name="Sale",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("table_number", models.CharField(blank=True, default="", max_length=40)),
                ("customer_name", models.CharField(blank=True, default="", max_length=120)),
                ("waiter_name", models.CharField(blank=True, default="", max_length=120)),
                ("items", models.JSONField(default=list)),
                ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("tax", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("discount", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("created_at", models.DateTimeField()),
                ("business_day", models.DateField()),
                ("created_db_entry_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("cashier", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["business_day"], name="pos_sale_business_day_idx"),
                    models.Index(fields=["cashier", "business_day"], name="pos_sale_cashier_day_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DeletedItemLog",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("menu_item_id", models.CharField(blank=True, max_length=64, null=True)),
                ("item_name", models.CharField(max_length=120)),
                ("item_code", models.CharField(blank=True, default="", max_length=40)),
                ("quantity_removed", models.PositiveIntegerField()),
                ("price_per_item", models.DecimalField(decimal_places=2, max_digits=12)),
                ("bill_id", models.UUIDField(blank=True, null=True)),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                ("reason", models.CharField(blank=True, default="", max_length=120)),
                ("is_deal_item", models.BooleanField(default=False)),
                ("deal_name", models.CharField(blank=True, default="", max_length=120)),
                ("removed_by", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="deleted_item_logs", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-timestamp"],
                "indexes": [models.Index(fields=["timestamp"], name="pos_deleted_timestamp_idx")],
            },
        ),
    ]
