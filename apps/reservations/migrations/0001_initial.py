import uuid

import django.db.models.expressions
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BookingRecord",
            fields=[
                (
                    "id",
                    models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False),
                ),
                ("vehicle_id", models.UUIDField(db_index=True)),
                ("model_id", models.UUIDField(db_index=True)),
                (
                    "external_booking_id",
                    models.CharField(
                        db_index=True,
                        help_text="Opaque key supplied by the booking orchestrator; idempotency key for holds.",
                        max_length=64,
                    ),
                ),
                ("interval_start", models.DateTimeField()),
                ("interval_end", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("cancelled", "Cancelled"),
                            ("expired", "Expired"),
                        ],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("payment_reference", models.CharField(blank=True, max_length=255)),
                ("notes", models.TextField(blank=True)),
                ("cancellation_reason", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("last_updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "verbose_name": "Booking record",
                "verbose_name_plural": "Booking records",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["vehicle_id", "interval_start", "interval_end"],
                        name="booking_record_vehicle_idx",
                    ),
                    models.Index(fields=["status", "expires_at"], name="booking_record_expiry_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("interval_end__gt", django.db.models.expressions.F("interval_start"))
                        ),
                        name="booking_record_valid_interval",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("expires_at__isnull", False), ("status", "pending")),
                            models.Q(models.Q(("status", "pending"), _negated=True), ("expires_at__isnull", True)),
                            _connector="OR",
                        ),
                        name="booking_record_expiry_iff_pending",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("status__in", ["pending", "confirmed"])),
                        fields=("external_booking_id",),
                        name="booking_record_one_active_per_booking",
                    ),
                ],
            },
        ),
    ]
