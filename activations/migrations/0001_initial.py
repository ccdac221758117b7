import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("licenses", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Activation",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "device_id",
                    models.CharField(help_text="Opaque client device identifier", max_length=255),
                ),
                ("device_name", models.CharField(blank=True, max_length=255, null=True)),
                ("activated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "license",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="activations",
                        to="licenses.license",
                    ),
                ),
            ],
            options={
                "db_table": "license_activations",
                "ordering": ["-activated_at"],
                "indexes": [
                    models.Index(
                        fields=["license", "activated_at"], name="activations_license_time_idx"
                    )
                ],
                "unique_together": {("license", "device_id")},
            },
        ),
    ]
