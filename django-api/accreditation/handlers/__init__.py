from accreditation.handlers.views import (
    BulkRegistrationView,
    QuotaRuleDetailView,
    QuotaRuleListView,
    RegistrationCreateView,
    RegistrationDetailView,
    ZoneRuleDetailView,
    ZoneRuleListView,
)

__all__ = [
    "BulkRegistrationView",
    "QuotaRuleDetailView",
    "QuotaRuleListView",
    "RegistrationCreateView",
    "RegistrationDetailView",
    "ZoneRuleDetailView",
    "ZoneRuleListView",
]
