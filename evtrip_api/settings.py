import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


def env_bool(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def env_list(name: str, default: str) -> list[str]:
    raw_value = os.getenv(name, default)
    return [item.strip() for item in raw_value.split(",") if item.strip()]


def env_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return int(raw_value)


def env_float(name: str, default: float) -> float:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return float(raw_value)


SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-secret-key-change-me")
DEBUG = env_bool("DEBUG", True)
ALLOWED_HOSTS = env_list("ALLOWED_HOSTS", "127.0.0.1,localhost,testserver")
CSRF_TRUSTED_ORIGINS = env_list("CSRF_TRUSTED_ORIGINS", "")

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    "rest_framework",
    "drf_spectacular",
    "charging",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "evtrip_api.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "evtrip_api.wsgi.application"

# Nothing is persisted; the database only backs Django's contrib apps.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "evtrip-locmem-cache",
        "TIMEOUT": 24 * 60 * 60,
    }
}

REST_FRAMEWORK = {
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "EV Trip Charging Planner API",
    "DESCRIPTION": "Charging station search and range-aware charging stop planning for EV road trips.",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "charging": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

EXTERNAL_API_TIMEOUT_SECONDS = env_int("EXTERNAL_API_TIMEOUT_SECONDS", 15)
OSRM_API_BASE_URL = os.getenv("OSRM_API_BASE_URL", "https://router.project-osrm.org")

OCM_API_BASE_URL = os.getenv("OCM_API_BASE_URL", "https://api.openchargemap.io/v3/poi")
OCM_API_KEY = os.getenv("OCM_API_KEY", "")
NOBIL_API_BASE_URL = os.getenv("NOBIL_API_BASE_URL", "https://nobil.no/api/server/search.php")
NOBIL_API_KEY = os.getenv("NOBIL_API_KEY", "")

# Priority order: stations from the first source win proximity duplicates.
CHARGING_STATION_SOURCES = env_list("CHARGING_STATION_SOURCES", "ocm,nobil")
CHARGING_MAX_RESULTS = env_int("CHARGING_MAX_RESULTS", 50)
CHARGING_SEARCH_RADIUS_KM = env_float("CHARGING_SEARCH_RADIUS_KM", 25.0)
CHARGING_SEARCH_SPACING_KM = env_float("CHARGING_SEARCH_SPACING_KM", 40.0)
CHARGING_MAX_SEARCH_CENTERS = env_int("CHARGING_MAX_SEARCH_CENTERS", 25)
ROUTE_SAMPLE_SPACING_KM = env_float("ROUTE_SAMPLE_SPACING_KM", 5.0)
STATION_DEDUP_TOLERANCE_DEGREES = env_float("STATION_DEDUP_TOLERANCE_DEGREES", 0.0005)
STATION_CACHE_SECONDS = env_int("STATION_CACHE_SECONDS", 60 * 60)

CHARGING_MIN_BATTERY_PERCENT = env_float("CHARGING_MIN_BATTERY_PERCENT", 15.0)
CHARGING_TARGET_PERCENT = env_float("CHARGING_TARGET_PERCENT", 80.0)
CHARGING_INSERTION_FRACTION = env_float("CHARGING_INSERTION_FRACTION", 0.6)
CHARGING_CORRIDOR_KM = env_float("CHARGING_CORRIDOR_KM", 20.0)

PROVIDER_RATE_LIMIT_MAX_REQUESTS = env_int("PROVIDER_RATE_LIMIT_MAX_REQUESTS", 60)
PROVIDER_RATE_LIMIT_WINDOW_SECONDS = env_float("PROVIDER_RATE_LIMIT_WINDOW_SECONDS", 60.0)
