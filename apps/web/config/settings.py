"""
Django settings for Supra Web.

Configuration comes from the environment - never hardcode credentials.
Run with: uv run python apps/web/manage.py runserver
"""

from pathlib import Path

import environ  # type: ignore[import-untyped]

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Initialize environ
env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, []),
    BACKEND_API_URL=(str, "http://localhost:3000"),
    BACKEND_API_TIMEOUT=(float, 10.0),
    RESTAURANT_TIME_ZONE=(str, "Europe/Moscow"),
    DELIVERY_FEE_RATE=(str, "0.05"),
    RESERVATION_MAX_DAYS_AHEAD=(int, 31),
    CATALOG_CACHE_SECONDS=(int, 300),
    LOG_LEVEL=(str, "INFO"),
)

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env("DEBUG")

ALLOWED_HOSTS = env("ALLOWED_HOSTS")

# Application definition
INSTALLED_APPS = [
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local apps
    "apps.web.core",
    "apps.web.accounts",
    "apps.web.catalog",
    "apps.web.cart",
    "apps.web.checkout",
    "apps.web.reservations",
    "apps.web.reviews",
    "apps.web.manager",
    "apps.web.administration",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "apps.web.core.middleware.BackendSessionMiddleware",
]

ROOT_URLCONF = "apps.web.config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                "apps.web.core.context_processors.session_user",
            ],
        },
    },
]

WSGI_APPLICATION = "apps.web.config.wsgi.application"

# Database
# All data lives behind the backend API; this app has no database.
DATABASES: dict = {}

# Cache and sessions
# CACHE_URL e.g. redis://localhost:6379/1 when running several workers
CACHES = {
    "default": env.cache("CACHE_URL", default="locmemcache://"),
}
SESSION_ENGINE = "django.contrib.sessions.backends.cache"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_AGE = 60 * 60 * 24 * 7
MESSAGE_STORAGE = "django.contrib.messages.storage.fallback.FallbackStorage"

# Backend API
BACKEND_API_URL = env("BACKEND_API_URL")
BACKEND_API_TIMEOUT = env("BACKEND_API_TIMEOUT")

# Restaurant rules
RESTAURANT_TIME_ZONE = env("RESTAURANT_TIME_ZONE")
DELIVERY_FEE_RATE = env("DELIVERY_FEE_RATE")
RESERVATION_MAX_DAYS_AHEAD = env("RESERVATION_MAX_DAYS_AHEAD")
CATALOG_CACHE_SECONDS = env("CATALOG_CACHE_SECONDS")

# Logging
LOG_LEVEL = env("LOG_LEVEL")
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "apps.web": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "httpx": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR.parent.parent / "staticfiles"  # /app/staticfiles in production
