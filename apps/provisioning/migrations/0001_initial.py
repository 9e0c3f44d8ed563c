import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Server",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, verbose_name="Server Name")),
                ("host", models.CharField(blank=True, max_length=255, verbose_name="Host")),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("maintenance", "Maintenance"), ("disabled", "Disabled")],
                        default="active",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "auto_renew",
                    models.BooleanField(
                        default=False,
                        help_text="Renew panel accounts automatically after payment",
                        verbose_name="Auto Renew",
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="servers",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Reseller",
                    ),
                ),
            ],
            options={
                "verbose_name": "Server",
                "verbose_name_plural": "Servers",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="PanelCredentials",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("encrypted_payment_webhook_secret", models.TextField(blank=True)),
                ("rush_base_url", models.URLField(blank=True, verbose_name="Rush Base URL")),
                ("rush_username", models.CharField(blank=True, max_length=150, verbose_name="Rush Username")),
                ("encrypted_rush_password", models.TextField(blank=True)),
                ("encrypted_rush_token", models.TextField(blank=True)),
                ("natv_base_url", models.URLField(blank=True, verbose_name="NATV Base URL")),
                ("encrypted_natv_api_key", models.TextField(blank=True)),
                ("natv_department_id", models.CharField(blank=True, max_length=50, verbose_name="NATV Department")),
                ("the_best_base_url", models.URLField(blank=True, verbose_name="The Best Base URL")),
                (
                    "the_best_username",
                    models.CharField(blank=True, max_length=150, verbose_name="The Best Username"),
                ),
                ("encrypted_the_best_password", models.TextField(blank=True)),
                ("xui_enabled", models.BooleanField(default=False, verbose_name="XUI Enabled")),
                ("xui_db_host", models.CharField(blank=True, max_length=255, verbose_name="XUI Database Host")),
                ("xui_db_port", models.CharField(blank=True, max_length=20, verbose_name="XUI Database Port")),
                ("xui_db_name", models.CharField(blank=True, max_length=100, verbose_name="XUI Database Name")),
                ("xui_db_user", models.CharField(blank=True, max_length=100, verbose_name="XUI Database User")),
                ("encrypted_xui_db_password", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "owner",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="panel_credentials",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Reseller",
                    ),
                ),
            ],
            options={
                "verbose_name": "Panel Credentials",
                "verbose_name_plural": "Panel Credentials",
            },
        ),
    ]
