"""
Django settings for the sync trigger endpoint.
"""

import os

# Security settings
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-secret-key-change-in-production")
DEBUG = os.environ.get("DJANGO_DEBUG", "False").lower() == "true"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,*").split(",")

# No models, no sessions, no admin: the endpoint is stateless
INSTALLED_APPS: list[str] = []
DATABASES: dict = {}

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "pemo_qoyod.web.urls"

# Logging
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "pipe": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "pipe",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "pemo_qoyod": {
            "handlers": ["console"],
            "level": os.environ.get("SYNC_LOG_LEVEL", "INFO"),
        },
    },
}

# Optional config.yaml; environment variables always take precedence
SYNC_CONFIG_PATH = os.environ.get("SYNC_CONFIG_PATH") or None
