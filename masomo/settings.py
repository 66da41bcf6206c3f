"""
Django settings for the masomo project.

Values come from the environment (or a .env file) through python-decouple.
"""

import sys
from pathlib import Path
from django.core.management.utils import get_random_secret_key
from decouple import config, Csv

# ==================== BASE CONFIGURATION ====================
BASE_DIR = Path(__file__).resolve().parent.parent

# ==================== ENVIRONMENT DETECTION ====================
ENVIRONMENT = config('DJANGO_ENVIRONMENT', default='development')
IS_PRODUCTION = ENVIRONMENT == 'production'
IS_DEVELOPMENT = ENVIRONMENT == 'development'
IS_TESTING = 'test' in sys.argv or any('pytest' in arg for arg in sys.argv[:1])

# ==================== SECURITY SETTINGS ====================
SECRET_KEY = config('SECRET_KEY', default=get_random_secret_key())
DEBUG = config('DEBUG', default=not IS_PRODUCTION, cast=bool)
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1,testserver', cast=Csv())

# ==================== APPLICATION DEFINITION ====================
DJANGO_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
]

LOCAL_APPS = [
    'school',
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

# ==================== DATABASE CONFIGURATION ====================
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': config('DATABASE_NAME', default=str(BASE_DIR / 'db.sqlite3')),
        'OPTIONS': {
            'timeout': 30,
        },
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ==================== INTERNATIONALIZATION ====================
LANGUAGE_CODE = config('LANGUAGE_CODE', default='fr')
TIME_ZONE = config('TIME_ZONE', default='Africa/Kinshasa')
USE_I18N = True
USE_TZ = True

# ==================== LOGGING CONFIGURATION ====================
LOGS_DIR = Path(config('LOGS_DIR', default=str(BASE_DIR / 'logs')))
LOGS_DIR.mkdir(exist_ok=True)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
        'file': {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOGS_DIR / 'masomo.log',
            'maxBytes': 1024 * 1024 * 10,
            'backupCount': 5,
            'formatter': 'verbose',
        },
        'error_file': {
            'level': 'ERROR',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': LOGS_DIR / 'errors.log',
            'maxBytes': 1024 * 1024 * 10,
            'backupCount': 5,
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': False,
        },
        'school': {
            'handlers': ['console', 'file', 'error_file'],
            'level': config('LOG_LEVEL', default='DEBUG' if DEBUG else 'INFO'),
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': 'WARNING',
    },
}

# Keep test output readable
if IS_TESTING:
    LOGGING['handlers']['console']['level'] = 'CRITICAL'

# ==================== CUSTOM APPLICATION SETTINGS ====================
# School information (report-card header)
SCHOOL_NAME = config('SCHOOL_NAME', default="Complexe Scolaire Masomo")
SCHOOL_ADDRESS = config('SCHOOL_ADDRESS', default="Kinshasa, RDC")
SCHOOL_CODE = config('SCHOOL_CODE', default="")

# Fees
DEFAULT_CURRENCY = config('DEFAULT_CURRENCY', default='CDF')
FEE_DUE_DAY = config('FEE_DUE_DAY', default=15, cast=int)

# Report-card verification
BULLETIN_VERIFICATION_URL = config(
    'BULLETIN_VERIFICATION_URL',
    default='https://masomo.app/verification-bulletin/'
)

VERSION = config('VERSION', default="1.0.0")
BUILD_NUMBER = config('BUILD_NUMBER', default="dev")
