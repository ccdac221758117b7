import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="License",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("license_key", models.CharField(max_length=100, unique=True)),
                (
                    "tier",
                    models.CharField(
                        choices=[("free", "Free"), ("pro", "Pro"), ("lifetime", "Lifetime")],
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("expired", "Expired"),
                            ("revoked", "Revoked"),
                        ],
                        default="active",
                        max_length=20,
                    ),
                ),
                (
                    "email",
                    models.EmailField(blank=True, db_index=True, max_length=254, null=True),
                ),
                ("customer_id", models.CharField(blank=True, max_length=100, null=True)),
                (
                    "order_id",
                    models.CharField(blank=True, max_length=100, null=True, unique=True),
                ),
                (
                    "subscription_id",
                    models.CharField(blank=True, db_index=True, max_length=100, null=True),
                ),
                (
                    "max_activations",
                    models.PositiveIntegerField(default=3, help_text="Maximum number of devices"),
                ),
                (
                    "expires_at",
                    models.DateTimeField(
                        blank=True, help_text="Empty means never expires", null=True
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "licenses",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "expires_at"], name="licenses_status_expires_idx"
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(max_activations__gte=1),
                        name="licenses_max_activations_gte_1",
                    )
                ],
            },
        ),
    ]
