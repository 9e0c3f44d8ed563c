"""
Django settings for ResellerHub - Base Configuration
IPTV reseller back office: payment reconciliation and panel renewals.
"""

import os
from pathlib import Path
from typing import Any

# ===============================================================================
# CORE DJANGO SETTINGS
# ===============================================================================

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Application definition
DJANGO_APPS: list[str] = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

THIRD_PARTY_APPS: list[str] = [
    'rest_framework',
]

LOCAL_APPS: list[str] = [
    'apps.common',
    'apps.settings',       # ⚙️ Runtime business settings
    'apps.customers',
    'apps.billing',
    'apps.provisioning',   # 🖥️ IPTV panel gateways & credit ledger
    'apps.integrations',   # 🔌 Payment processor webhooks
    'apps.api',
]

INSTALLED_APPS: list[str] = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE: list[str] = [
    'apps.common.middleware.RequestIDMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'
ASGI_APPLICATION = 'config.asgi.application'

# ===============================================================================
# DATABASE CONFIGURATION
# ===============================================================================

DATABASES: dict[str, dict[str, Any]] = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'resellerhub'),
        'USER': os.environ.get('DB_USER', 'resellerhub'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'development_password'),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
        'CONN_MAX_AGE': 60,  # Database connection pooling
        'OPTIONS': {
            'application_name': 'resellerhub',
        },
    }
}

# ===============================================================================
# AUTHENTICATION & AUTHORIZATION
# ===============================================================================

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator', 'OPTIONS': {'min_length': 12}},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

# ===============================================================================
# INTERNATIONALIZATION & LOCALIZATION
# ===============================================================================

LANGUAGE_CODE = 'pt-br'
TIME_ZONE = 'America/Sao_Paulo'  # Due dates are local calendar dates
USE_I18N = True
USE_TZ = True

# ===============================================================================
# STATIC FILES
# ===============================================================================

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# ===============================================================================
# CACHE CONFIGURATION (Database)
# ===============================================================================

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.db.DatabaseCache',
        'LOCATION': 'resellerhub_cache_table',
        'TIMEOUT': 300,
    }
}

# ===============================================================================
# SESSION & COOKIE SETTINGS
# ===============================================================================

SESSION_COOKIE_AGE = 86400  # 24 hours
SESSION_COOKIE_HTTPONLY = True
CSRF_COOKIE_HTTPONLY = True
CSRF_TRUSTED_ORIGINS: list[str] = []
# Note: *_COOKIE_SECURE = True set in prod.py

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'
DATA_UPLOAD_MAX_MEMORY_SIZE = 2621440  # 2.5MB, webhook bodies are tiny

# ===============================================================================
# DJANGO REST FRAMEWORK
# ===============================================================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
        'rest_framework.authentication.BasicAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_THROTTLE_CLASSES': [
        'apps.api.core.throttling.StandardAPIThrottle',
    ],
}

# ===============================================================================
# RATE LIMITING CONFIGURATION 🔒
# ===============================================================================

# Cache backend for rate limiting (uses database cache)
RATELIMIT_USE_CACHE = 'default'

# Enable rate limiting (can be disabled in development)
RATELIMIT_ENABLE = True

# ===============================================================================
# PAYMENT WEBHOOKS 💳
# ===============================================================================

# Global shared secret; resellers may also configure their own in PanelCredentials
PAYMENT_WEBHOOK_SECRET = os.environ.get('PAYMENT_WEBHOOK_SECRET', '')

# ===============================================================================
# PANEL PROVISIONING 🖥️
# ===============================================================================

# Upper bound on concurrent panel calls for one payment
PROVISIONING_RENEWAL_MAX_WORKERS = int(os.environ.get('PROVISIONING_RENEWAL_MAX_WORKERS', '5'))

# Legacy single-panel XUI database, used when a reseller has none configured
XUI_DATABASE: dict[str, str] = {
    'HOST': os.environ.get('XUI_DATABASE_HOST', ''),
    'PORT': os.environ.get('XUI_DATABASE_PORT', '3306'),
    'NAME': os.environ.get('XUI_DATABASE_NAME', ''),
    'USER': os.environ.get('XUI_DATABASE_USER', ''),
    'PASSWORD': os.environ.get('XUI_DATABASE_PASSWORD', ''),
}

# Global XUI One line API, used when a reseller has neither a panel database nor an API configured
XUI_ONE_BASE_URL = os.environ.get('XUI_ONE_BASE_URL', '')
XUI_ONE_ACCESS_CODE = os.environ.get('XUI_ONE_ACCESS_CODE', '')
XUI_ONE_API_KEY = os.environ.get('XUI_ONE_API_KEY', '')

# Global NATV account, used when a reseller has none configured
NATV_API_KEY = os.environ.get('NATV_API_KEY', '')
NATV_BASE_URL = os.environ.get('NATV_BASE_URL', '')

# Fernet key for panel credentials stored in the database
ENCRYPTION_KEY = os.environ.get('ENCRYPTION_KEY', '')

# ===============================================================================
# DEFAULT AUTO FIELD
# ===============================================================================

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ===============================================================================
# SECURITY SETTINGS (Base - override in prod.py)
# ===============================================================================

# SECRET_KEY validation for production security
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY')
if not SECRET_KEY:
    # Development fallback - never use this in production
    import warnings
    warnings.warn(
        "🚨 SECURITY WARNING: Using default SECRET_KEY. "
        "Set DJANGO_SECRET_KEY environment variable for production!",
        UserWarning,
        stacklevel=2
    )
    SECRET_KEY = 'django-insecure-dev-key-only-change-in-production-or-tests'  # noqa: S105


def validate_production_secret_key() -> None:
    """Validate SECRET_KEY meets production security requirements"""
    if SECRET_KEY and SECRET_KEY.startswith('django-insecure-'):
        raise ValueError(
            "🔥 CRITICAL SECURITY ERROR: Cannot use insecure SECRET_KEY in production! "
            "Generate a secure key: python -c 'from django.core.management.utils import get_random_secret_key; print(get_random_secret_key())'"
        )
