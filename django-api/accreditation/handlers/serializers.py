"""Serializers for request validation and domain model responses."""

from rest_framework import serializers

from accreditation.domain import Candidate, MatchField, RegistrationStatus


def _capacity(value):
    return None if value is None else value.value


class CandidateSerializer(serializers.Serializer):
    """Input for a single registration request."""

    category = serializers.CharField(max_length=100)
    organization = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True, default=None
    )
    cargo = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True, default=None
    )

    def to_candidate(self, data: dict | None = None) -> Candidate:
        data = self.validated_data if data is None else data
        return Candidate(
            category=data["category"],
            organization=data.get("organization"),
            cargo=data.get("cargo"),
        )


class BulkAdmissionSerializer(serializers.Serializer):
    """Input for a bulk import."""

    registrations = CandidateSerializer(many=True, allow_empty=False)

    def to_candidates(self) -> list[Candidate]:
        child = CandidateSerializer()
        return [child.to_candidate(item) for item in self.validated_data["registrations"]]


class RegistrationUpdateSerializer(serializers.Serializer):
    """Input for status changes and manual zone assignment."""

    status = serializers.ChoiceField(
        choices=[status.value for status in RegistrationStatus], required=False
    )
    zone = serializers.CharField(max_length=100, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide status and/or zone")
        return attrs


class QuotaRuleInputSerializer(serializers.Serializer):
    category = serializers.CharField(max_length=100)
    max_per_organization = serializers.IntegerField(
        min_value=0, required=False, allow_null=True, default=None
    )
    max_global = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    priority = serializers.IntegerField(required=False, default=0)


class ZoneRuleInputSerializer(serializers.Serializer):
    match_field = serializers.ChoiceField(choices=[field.value for field in MatchField])
    match_value = serializers.CharField(max_length=255)
    zone = serializers.CharField(max_length=100)


class AdmissionResultSerializer(serializers.Serializer):
    """Serializer for AdmissionResult domain model."""

    admitted = serializers.BooleanField()
    reason = serializers.SerializerMethodField()
    assigned_zone = serializers.CharField(allow_null=True)
    registration_id = serializers.SerializerMethodField()

    def get_reason(self, obj):
        return obj.reason.value if obj.reason else None

    def get_registration_id(self, obj):
        return str(obj.registration_id) if obj.registration_id else None


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model."""

    id = serializers.SerializerMethodField()
    event_id = serializers.SerializerMethodField()
    organization = serializers.CharField()
    category = serializers.CharField()
    cargo = serializers.CharField()
    status = serializers.SerializerMethodField()
    zone = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()

    def get_id(self, obj):
        return str(obj.id)

    def get_event_id(self, obj):
        return str(obj.event_id)

    def get_status(self, obj):
        return obj.status.value


class QuotaRuleSerializer(serializers.Serializer):
    """Serializer for QuotaRule domain model."""

    id = serializers.SerializerMethodField()
    category = serializers.CharField()
    max_per_organization = serializers.SerializerMethodField()
    max_global = serializers.SerializerMethodField()
    priority = serializers.IntegerField()
    created_at = serializers.DateTimeField()

    def get_id(self, obj):
        return str(obj.id)

    def get_max_per_organization(self, obj):
        return _capacity(obj.max_per_organization)

    def get_max_global(self, obj):
        return _capacity(obj.max_global)


class QuotaUsageSerializer(serializers.Serializer):
    """Serializer for QuotaUsage domain model."""

    rule = QuotaRuleSerializer()
    used_global = serializers.IntegerField(source="global_count")
    used_by_organization = serializers.DictField(
        source="organization_counts", child=serializers.IntegerField()
    )


class QuotaCheckSerializer(serializers.Serializer):
    """Serializer for QuotaCheck domain model."""

    available = serializers.BooleanField(source="decision.admitted")
    reason = serializers.SerializerMethodField()
    used_org = serializers.IntegerField(source="organization_count")
    max_org = serializers.SerializerMethodField()
    used_global = serializers.IntegerField(source="global_count")
    max_global = serializers.SerializerMethodField()

    def get_reason(self, obj):
        return obj.decision.reason.value if obj.decision.reason else None

    def get_max_org(self, obj):
        return _capacity(obj.rule.max_per_organization) if obj.rule else None

    def get_max_global(self, obj):
        return _capacity(obj.rule.max_global) if obj.rule else None


class ZoneRuleSerializer(serializers.Serializer):
    """Serializer for ZoneRule domain model."""

    id = serializers.SerializerMethodField()
    match_field = serializers.SerializerMethodField()
    match_value = serializers.CharField()
    zone = serializers.CharField()
    created_at = serializers.DateTimeField()

    def get_id(self, obj):
        return str(obj.id)

    def get_match_field(self, obj):
        return obj.match_field.value
