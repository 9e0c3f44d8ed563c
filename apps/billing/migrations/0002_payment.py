import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("billing", "0001_initial"),
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Amount")),
                (
                    "method",
                    models.CharField(
                        choices=[
                            ("pix", "Instant Transfer (PIX)"),
                            ("cash", "Cash"),
                            ("transfer", "Bank Transfer"),
                        ],
                        default="pix",
                        max_length=20,
                        verbose_name="Method",
                    ),
                ),
                ("confirmed", models.BooleanField(default=True, verbose_name="Confirmed")),
                (
                    "payment_date",
                    models.DateField(default=django.utils.timezone.localdate, verbose_name="Payment Date"),
                ),
                (
                    "source",
                    models.CharField(
                        blank=True,
                        help_text="Where the payment came from (e.g. cakto, manual)",
                        max_length=50,
                        verbose_name="Source",
                    ),
                ),
                (
                    "external_reference",
                    models.CharField(
                        blank=True,
                        help_text="Payment processor transaction id",
                        max_length=120,
                        verbose_name="External Reference",
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created At")),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="customers.customer",
                        verbose_name="Customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["customer", "created_at"], name="billing_payment_cust_created"),
                    models.Index(fields=["external_reference"], name="billing_payment_ext_ref_idx"),
                ],
            },
        ),
    ]
