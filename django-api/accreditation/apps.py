from django.apps import AppConfig


class AccreditationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accreditation"
    verbose_name = "Accreditation"

    def ready(self):
        from accreditation import signals  # noqa: F401
