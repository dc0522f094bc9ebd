"""
Production overlay.

The base module is evaluated before .env is loaded, so every value a
deployment sets through .env is read again here.
"""

import os

from dotenv import load_dotenv

from .settings import *  # noqa: F401,F403

load_dotenv(os.path.join(BASE_DIR, "..", ".env"))

DEBUG = False
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", SECRET_KEY)
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

# Dashboards are served from a separate origin
CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173").split(",")
CSRF_TRUSTED_ORIGINS = CORS_ALLOWED_ORIGINS
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

if os.getenv("POSTGRES_DB"):
    DATABASES["default"].update({
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRES_DB"),
        "USER": os.getenv("POSTGRES_USER", "postgres"),
        "PASSWORD": os.getenv("POSTGRES_PASSWORD", ""),
        "HOST": os.getenv("POSTGRES_HOST", "localhost"),
        "PORT": os.getenv("POSTGRES_PORT", "5432"),
    })

# Order broadcasts and the reconciliation schedule both go through Redis
REDIS_URL = os.getenv("REDIS_URL", REDIS_URL)
CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels_redis.core.RedisChannelLayer",
        "CONFIG": {"hosts": [REDIS_URL]},
    }
}
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", REDIS_URL)

MEDIA_ROOT = os.getenv("MEDIA_ROOT", MEDIA_ROOT)
ROUTING_SERVICE_URL = os.getenv("ROUTING_SERVICE_URL", ROUTING_SERVICE_URL)

LOG_LEVEL = os.getenv("LOG_LEVEL", LOG_LEVEL)
for logger_config in LOGGING["loggers"].values():
    logger_config["level"] = LOG_LEVEL
