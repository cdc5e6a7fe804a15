from django.urls import path

from accreditation.handlers import (
    BulkRegistrationView,
    QuotaRuleDetailView,
    QuotaRuleListView,
    RegistrationCreateView,
    RegistrationDetailView,
    ZoneRuleDetailView,
    ZoneRuleListView,
)

urlpatterns = [
    path(
        "events/<str:event_id>/registrations",
        RegistrationCreateView.as_view(),
        name="registration-create",
    ),
    path(
        "events/<str:event_id>/registrations/bulk",
        BulkRegistrationView.as_view(),
        name="registration-bulk",
    ),
    path(
        "registrations/<str:registration_id>",
        RegistrationDetailView.as_view(),
        name="registration-detail",
    ),
    path("events/<str:event_id>/quotas", QuotaRuleListView.as_view(), name="quota-rule-list"),
    path(
        "events/<str:event_id>/quotas/<str:rule_id>",
        QuotaRuleDetailView.as_view(),
        name="quota-rule-detail",
    ),
    path("events/<str:event_id>/zones", ZoneRuleListView.as_view(), name="zone-rule-list"),
    path(
        "events/<str:event_id>/zones/<str:rule_id>",
        ZoneRuleDetailView.as_view(),
        name="zone-rule-detail",
    ),
]
