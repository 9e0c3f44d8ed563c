import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SystemSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "key",
                    models.CharField(
                        help_text='Unique setting identifier (e.g., "billing.duplicate_window_seconds")',
                        max_length=100,
                        unique=True,
                        verbose_name="Key",
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        default="system",
                        help_text="Setting category for organization",
                        max_length=50,
                        verbose_name="Category",
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        blank=True, help_text="Human-readable setting name", max_length=200, verbose_name="Name"
                    ),
                ),
                (
                    "description",
                    models.TextField(blank=True, help_text="What this setting controls", verbose_name="Description"),
                ),
                (
                    "data_type",
                    models.CharField(
                        choices=[
                            ("string", "String"),
                            ("integer", "Integer"),
                            ("boolean", "Boolean"),
                            ("decimal", "Decimal"),
                            ("list", "List"),
                            ("json", "JSON"),
                        ],
                        default="string",
                        help_text="Type of data this setting stores",
                        max_length=20,
                        verbose_name="Data Type",
                    ),
                ),
                (
                    "value",
                    models.JSONField(blank=True, help_text="Current setting value", null=True, verbose_name="Value"),
                ),
                (
                    "default_value",
                    models.JSONField(
                        blank=True,
                        help_text="Default value to use if setting is not configured",
                        null=True,
                        verbose_name="Default Value",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=True, help_text="Whether this setting is currently active", verbose_name="Is Active"
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When this setting was created",
                        verbose_name="Created At",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="When this setting was last updated", verbose_name="Updated At"
                    ),
                ),
            ],
            options={
                "verbose_name": "System Setting",
                "verbose_name_plural": "System Settings",
                "ordering": ["category", "key"],
                "indexes": [models.Index(fields=["category"], name="settings_category_idx")],
            },
        ),
    ]
