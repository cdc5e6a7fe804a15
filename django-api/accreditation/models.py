"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models
from django.db.models import Max

from accreditation.domain.value_objects import normalize_key, normalize_organization


def _next_position(model, event_id) -> int:
    """Per-event insertion counter that breaks created_at ties."""
    last = model.objects.filter(event_id=event_id).aggregate(Max("position"))["position__max"]
    return (last or 0) + 1


class Event(models.Model):
    """Persistence model for accreditation events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.SlugField(max_length=100)
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "-created_at"], name="accreditati_tenant_6b1f0e_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class QuotaRule(models.Model):
    """Persistence model for per-category quota rules."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="quota_rules")
    category = models.CharField(max_length=100)
    category_key = models.CharField(max_length=100, editable=False)
    max_per_organization = models.PositiveIntegerField(null=True, blank=True)
    max_global = models.PositiveIntegerField(null=True, blank=True)
    priority = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    position = models.PositiveIntegerField(default=0, editable=False)

    class Meta:
        ordering = ["created_at", "position"]
        indexes = [
            models.Index(fields=["event", "category_key"], name="accreditati_event_i_3c9a41_idx"),
        ]

    def save(self, *args, **kwargs):
        self.category = self.category.strip()
        self.category_key = normalize_key(self.category)
        if self._state.adding and not self.position:
            self.position = _next_position(QuotaRule, self.event_id)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.category} ({self.max_per_organization}/{self.max_global})"


class ZoneRule(models.Model):
    """Persistence model for zone assignment rules."""

    class MatchField(models.TextChoices):
        CARGO = "cargo", "Cargo"
        TIPO_MEDIO = "tipo_medio", "Tipo de medio"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="zone_rules")
    match_field = models.CharField(max_length=20, choices=MatchField.choices)
    match_value = models.CharField(max_length=255)
    match_key = models.CharField(max_length=255, editable=False)
    zone = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    position = models.PositiveIntegerField(default=0, editable=False)

    class Meta:
        ordering = ["created_at", "position"]
        indexes = [
            models.Index(fields=["event", "created_at"], name="accreditati_event_i_8d2e57_idx"),
        ]

    def save(self, *args, **kwargs):
        self.match_value = self.match_value.strip()
        self.match_key = normalize_key(self.match_value)
        if self._state.adding and not self.position:
            self.position = _next_position(ZoneRule, self.event_id)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.match_field}={self.match_value} -> {self.zone}"


class Registration(models.Model):
    """Persistence model for accreditation registrations."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    organization = models.CharField(max_length=255, blank=True, default="")
    category = models.CharField(max_length=100)
    category_key = models.CharField(max_length=100, editable=False)
    cargo = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    zone = models.CharField(max_length=100, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(
                fields=["event", "category_key", "organization"],
                name="accreditati_event_i_5f7b2c_idx",
            ),
            models.Index(fields=["event", "status"], name="accreditati_event_i_a41d90_idx"),
        ]

    def save(self, *args, **kwargs):
        self.organization = normalize_organization(self.organization)
        self.category_key = normalize_key(self.category)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.organization or '-'} / {self.category} ({self.status})"
