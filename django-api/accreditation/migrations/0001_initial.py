import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant", models.SlugField(max_length=100)),
                ("name", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "-created_at"], name="accreditati_tenant_6b1f0e_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="QuotaRule",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("category", models.CharField(max_length=100)),
                ("category_key", models.CharField(editable=False, max_length=100)),
                ("max_per_organization", models.PositiveIntegerField(blank=True, null=True)),
                ("max_global", models.PositiveIntegerField(blank=True, null=True)),
                ("priority", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="quota_rules",
                        to="accreditation.event",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["event", "category_key"], name="accreditati_event_i_3c9a41_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ZoneRule",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "match_field",
                    models.CharField(
                        choices=[("cargo", "Cargo"), ("tipo_medio", "Tipo de medio")],
                        max_length=20,
                    ),
                ),
                ("match_value", models.CharField(max_length=255)),
                ("match_key", models.CharField(editable=False, max_length=255)),
                ("zone", models.CharField(max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="zone_rules",
                        to="accreditation.event",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["event", "created_at"], name="accreditati_event_i_8d2e57_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("organization", models.CharField(blank=True, default="", max_length=255)),
                ("category", models.CharField(max_length=100)),
                ("category_key", models.CharField(editable=False, max_length=100)),
                ("cargo", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("zone", models.CharField(blank=True, max_length=100, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="accreditation.event",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["event", "category_key", "organization"],
                        name="accreditati_event_i_5f7b2c_idx",
                    ),
                    models.Index(fields=["event", "status"], name="accreditati_event_i_a41d90_idx"),
                ],
            },
        ),
    ]
