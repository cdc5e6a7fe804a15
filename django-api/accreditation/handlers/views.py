"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accreditation.conf import AdmissionConfig
from accreditation.domain import Candidate, DenialReason
from accreditation.domain.errors import DomainError, ErrorCode
from accreditation.handlers.serializers import (
    AdmissionResultSerializer,
    BulkAdmissionSerializer,
    CandidateSerializer,
    QuotaCheckSerializer,
    QuotaRuleInputSerializer,
    QuotaRuleSerializer,
    QuotaUsageSerializer,
    RegistrationSerializer,
    RegistrationUpdateSerializer,
    ZoneRuleInputSerializer,
    ZoneRuleSerializer,
)
from accreditation.services.admission_service import AdmissionService
from accreditation.services.rule_service import RuleService
from accreditation.stores.django_store import DjangoRegistrationStore, DjangoRuleStore

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.UNKNOWN_EVENT: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.RULE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_REGISTRATION_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_RULE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_STATUS_TRANSITION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TRANSIENT_CONTENTION: status.HTTP_503_SERVICE_UNAVAILABLE,
}

DENIAL_STATUS = {
    DenialReason.GLOBAL_QUOTA_EXCEEDED: status.HTTP_409_CONFLICT,
    DenialReason.ORG_QUOTA_EXCEEDED: status.HTTP_409_CONFLICT,
    DenialReason.TRANSIENT_CONTENTION: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def admission_service() -> AdmissionService:
    config = AdmissionConfig.from_settings()
    return AdmissionService(
        DjangoRuleStore(zone_rules_cache_ttl=config.zone_rules_cache_ttl),
        DjangoRegistrationStore(lock_timeout_seconds=config.lock_timeout_seconds),
        config,
    )


def rule_service() -> RuleService:
    config = AdmissionConfig.from_settings()
    return RuleService(DjangoRuleStore(zone_rules_cache_ttl=config.zone_rules_cache_ttl), config)


def error_response(error: DomainError) -> Response:
    if error.code not in ERROR_STATUS:
        logger.error("Unmapped domain error %s", error.code.value)
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


def validation_response(errors) -> Response:
    return Response(
        {"error": {"code": "VALIDATION_ERROR", "message": "Invalid request", "fields": errors}},
        status=status.HTTP_400_BAD_REQUEST,
    )


class RegistrationCreateView(APIView):
    """Handler for POST /api/events/{event_id}/registrations"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = CandidateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        try:
            result = admission_service().admit(event_id, serializer.to_candidate())
        except DomainError as error:
            return error_response(error)

        code = status.HTTP_201_CREATED if result.admitted else DENIAL_STATUS[result.reason]
        return Response(AdmissionResultSerializer(result).data, status=code)


class BulkRegistrationView(APIView):
    """Handler for POST /api/events/{event_id}/registrations/bulk"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = BulkAdmissionSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        try:
            results = admission_service().admit_batch(event_id, serializer.to_candidates())
        except DomainError as error:
            return error_response(error)

        return Response(
            {
                "admitted": sum(1 for result in results if result.admitted),
                "denied": sum(1 for result in results if not result.admitted),
                "results": AdmissionResultSerializer(results, many=True).data,
            }
        )


class RegistrationDetailView(APIView):
    """Handler for PATCH /api/registrations/{registration_id}"""

    def patch(self, request: Request, registration_id: str) -> Response:
        serializer = RegistrationUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        try:
            change = admission_service().update_registration(
                registration_id, **serializer.validated_data
            )
        except DomainError as error:
            return error_response(error)

        if not change.applied:
            return Response(
                {
                    "applied": False,
                    "reason": change.reason.value,
                    "registration": RegistrationSerializer(change.registration).data,
                },
                status=DENIAL_STATUS[change.reason],
            )
        return Response(
            {"applied": True, "registration": RegistrationSerializer(change.registration).data}
        )


class QuotaRuleListView(APIView):
    """Handler for GET/POST /api/events/{event_id}/quotas"""

    def get(self, request: Request, event_id: str) -> Response:
        category = request.query_params.get("category")
        try:
            if category:
                candidate = Candidate(
                    category=category,
                    organization=request.query_params.get("organization"),
                )
                check = admission_service().check_quota(event_id, candidate)
                return Response(QuotaCheckSerializer(check).data)
            usage = rule_service().quota_usage(event_id)
        except DomainError as error:
            return error_response(error)
        return Response(QuotaUsageSerializer(usage, many=True).data)

    def post(self, request: Request, event_id: str) -> Response:
        serializer = QuotaRuleInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        try:
            rule = rule_service().save_quota_rule(event_id, **serializer.validated_data)
        except DomainError as error:
            return error_response(error)
        return Response(QuotaRuleSerializer(rule).data, status=status.HTTP_201_CREATED)


class QuotaRuleDetailView(APIView):
    """Handler for DELETE /api/events/{event_id}/quotas/{rule_id}"""

    def delete(self, request: Request, event_id: str, rule_id: str) -> Response:
        try:
            rule_service().delete_quota_rule(event_id, rule_id)
        except DomainError as error:
            return error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ZoneRuleListView(APIView):
    """Handler for GET/POST /api/events/{event_id}/zones"""

    def get(self, request: Request, event_id: str) -> Response:
        cargo = request.query_params.get("cargo")
        tipo_medio = request.query_params.get("tipo_medio")
        service = rule_service()
        try:
            if cargo or tipo_medio:
                zone = service.preview_zone(event_id, cargo=cargo, tipo_medio=tipo_medio)
                return Response({"cargo": cargo, "tipo_medio": tipo_medio, "zone": zone})
            rules = service.list_zone_rules(event_id)
        except DomainError as error:
            return error_response(error)
        return Response(ZoneRuleSerializer(rules, many=True).data)

    def post(self, request: Request, event_id: str) -> Response:
        serializer = ZoneRuleInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        try:
            rule = rule_service().save_zone_rule(event_id, **serializer.validated_data)
        except DomainError as error:
            return error_response(error)
        return Response(ZoneRuleSerializer(rule).data, status=status.HTTP_201_CREATED)


class ZoneRuleDetailView(APIView):
    """Handler for DELETE /api/events/{event_id}/zones/{rule_id}"""

    def delete(self, request: Request, event_id: str, rule_id: str) -> Response:
        try:
            rule_service().delete_zone_rule(event_id, rule_id)
        except DomainError as error:
            return error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)
