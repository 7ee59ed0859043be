import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                (
                    "id",
                    models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False),
                ),
                (
                    "model_id",
                    models.UUIDField(
                        db_index=True,
                        help_text="Car model the vehicle belongs to; allocation requests are made per model.",
                    ),
                ),
                ("license_plate", models.CharField(max_length=20, unique=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("available", "Available"), ("under_maintenance", "Under maintenance")],
                        default="available",
                        max_length=32,
                    ),
                ),
                (
                    "mileage_km",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Accumulated usage, used to spread holds across the fleet.",
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Vehicle",
                "verbose_name_plural": "Vehicles",
                "ordering": ["license_plate"],
                "indexes": [
                    models.Index(fields=["model_id", "status", "mileage_km"], name="fleet_vehicle_alloc_idx"),
                ],
            },
        ),
    ]
