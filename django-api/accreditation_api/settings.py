import os
from pathlib import Path

import dj_database_url
from dotenv import load_dotenv

from accreditation_api.logging_config import get_logging_config

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "changeme")
DEBUG = os.getenv("DJANGO_DEBUG", "False") == "True"
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "127.0.0.1,localhost,testserver").split(",")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "accreditation.apps.AccreditationConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "accreditation_api.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

DATABASES = {
    "default": dj_database_url.config(
        env="DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
    )
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "accreditation",
    }
}

LANGUAGE_CODE = "es-cl"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Authentication and role checks belong to the hosting platform.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# =============================================================================
# Accreditation engine
# =============================================================================
ACCREDITATION = {
    # "all": every registration consumes quota; "active": rejected and
    # cancelled registrations free their slot.
    "COUNT_POLICY": os.getenv("ACCREDITATION_COUNT_POLICY", "all"),
    "MAX_ATTEMPTS": int(os.getenv("ACCREDITATION_MAX_ATTEMPTS", "3")),
    "RETRY_BACKOFF_SECONDS": float(os.getenv("ACCREDITATION_RETRY_BACKOFF", "0.05")),
    "LOCK_TIMEOUT_SECONDS": float(os.getenv("ACCREDITATION_LOCK_TIMEOUT", "5")),
    "ZONE_RULES_CACHE_TTL": int(os.getenv("ACCREDITATION_ZONE_CACHE_TTL", "300")),
}

LOGGING = get_logging_config(DEBUG)
