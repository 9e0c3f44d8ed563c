"""
Test settings for ResellerHub
Fast, isolated testing environment.
"""

from .base import *  # noqa: F403

# ===============================================================================
# TEST FLAGS
# ===============================================================================

DEBUG = False

# Explicit test flag so views can soften behaviors (e.g., rate limits)
TESTING = True

# ===============================================================================
# TEST DATABASE (In-memory for speed)
# ===============================================================================

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
        'OPTIONS': {
            'timeout': 20,
        },
    }
}

# ===============================================================================
# TEST CACHE (Local memory)
# ===============================================================================

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'test-cache',
    }
}

SILENCED_SYSTEM_CHECKS = ['django_ratelimit.E003', 'django_ratelimit.W001']

# Disable rate limiting and DRF throttling so rapid test requests never see 429s
RATELIMIT_ENABLE = False
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []  # noqa: F405

# ===============================================================================
# PASSWORD HASHER (Fast for tests)
# ===============================================================================

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',  # Fast but insecure (test only)
]

# ===============================================================================
# LOGGING (Minimal for tests)
# ===============================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}

# ===============================================================================
# LOCALIZATION
# ===============================================================================

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'America/Sao_Paulo'  # Keep same timezone as production for consistency
USE_TZ = True

# ===============================================================================
# SECURITY (Relaxed for tests)
# ===============================================================================

SECRET_KEY = 'django-test-key-not-secure'  # noqa: S105
ALLOWED_HOSTS = ['testserver', 'localhost', '127.0.0.1']

# ===============================================================================
# ENCRYPTION (Test encryption key)
# ===============================================================================

ENCRYPTION_KEY = 'iuTrSBoKchmRt7RiySTHNuANNDmWe_xIqZWtMQaLMXs='

# ===============================================================================
# EXTERNAL SERVICES (Disabled in tests)
# ===============================================================================

PAYMENT_WEBHOOK_SECRET = 'test-webhook-secret'  # noqa: S105

# Renewals run inline: SQLite in-memory databases are per-connection
PROVISIONING_RENEWAL_MAX_WORKERS = 1

XUI_DATABASE = {'HOST': '', 'PORT': '3306', 'NAME': '', 'USER': '', 'PASSWORD': ''}
XUI_ONE_BASE_URL = ''
XUI_ONE_ACCESS_CODE = ''
XUI_ONE_API_KEY = ''
NATV_API_KEY = ''
NATV_BASE_URL = ''
