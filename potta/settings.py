"""
Django settings for the PottaAPI project.

Values are read from the environment; a .env file in the project root is
loaded first so a desktop install can ship its own overrides.
"""
import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from core.database import database_uri, locate_database

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default='', separator=','):
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(separator) if item.strip()]


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-potta-local-development-key')

DEBUG = env_bool('DJANGO_DEBUG', False)

ALLOWED_HOSTS = env_list('DJANGO_ALLOWED_HOSTS', '*')


# Application definition

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django.contrib.staticfiles',

    'corsheaders',
    'rest_framework',
    'rest_framework_simplejwt',
    'django_filters',
    'drf_yasg',
    'drf_spectacular',

    'core',
    'inventory',
    'tables',
    'floorplans',
    'staff',
    'orders',
    'taxes',
    'discounts',
    'operations',
    'customers',
    'sync',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'core.middleware.RequestLoggingMiddleware',
]

ROOT_URLCONF = 'potta.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'potta.wsgi.application'


# =============== API ===============

POTTA_API = {
    'PORT': int(os.environ.get('POTTA_API_PORT', '5001')),
    'VERSION': os.environ.get('POTTA_API_VERSION', '1.0.0'),
    'TITLE': os.environ.get('POTTA_API_TITLE', 'Potta Finance POS API'),
    'DESCRIPTION': os.environ.get('POTTA_API_DESCRIPTION', 'REST API for Potta Finance POS System'),
}


# =============== DATABASE ===============
# The SQLite file belongs to the desktop application; it is located, never created.

POTTA_DATABASE = {
    'FILE_NAME': os.environ.get('POTTA_DB_FILE_NAME', 'pottadb.db'),
    'PATH': os.environ.get('POTTA_DB_PATH') or None,
    'SEARCH_PATHS': env_list('POTTA_DB_SEARCH_PATHS', separator=os.pathsep),
    'DETAILED_ERRORS': env_bool('POTTA_DB_DETAILED_ERRORS', False),
    'COMMAND_TIMEOUT': int(os.environ.get('POTTA_DB_COMMAND_TIMEOUT', '30')),
}

DATABASE_PATH = locate_database(
    POTTA_DATABASE['FILE_NAME'],
    POTTA_DATABASE['SEARCH_PATHS'],
    BASE_DIR,
    POTTA_DATABASE['PATH'],
)

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': database_uri(DATABASE_PATH) if DATABASE_PATH else str(BASE_DIR / POTTA_DATABASE['FILE_NAME']),
        'OPTIONS': {
            'timeout': POTTA_DATABASE['COMMAND_TIMEOUT'],
        },
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Internationalization
# The desktop application writes naive local timestamps.

LANGUAGE_CODE = 'en-us'

TIME_ZONE = os.environ.get('POTTA_TIME_ZONE', 'Africa/Douala')

USE_I18N = True

USE_TZ = False


# Static files (CSS, JavaScript, Images)

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'


# =============== CORS ===============

CORS_ALLOW_ALL_ORIGINS = env_list('CORS_ALLOWED_ORIGINS', '*') == ['*']
if not CORS_ALLOW_ALL_ORIGINS:
    CORS_ALLOWED_ORIGINS = env_list('CORS_ALLOWED_ORIGINS')
CORS_ALLOW_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
CORS_ALLOW_CREDENTIALS = False


# =============== REST FRAMEWORK ===============

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'EXCEPTION_HANDLER': 'core.exceptions.custom_exception_handler',
    'COERCE_DECIMAL_TO_STRING': False,
    'DATETIME_FORMAT': '%Y-%m-%dT%H:%M:%S',
}

SPECTACULAR_SETTINGS = {
    'TITLE': POTTA_API['TITLE'],
    'DESCRIPTION': POTTA_API['DESCRIPTION'],
    'VERSION': POTTA_API['VERSION'],
    'SERVE_INCLUDE_SCHEMA': False,
}

SWAGGER_SETTINGS = {
    'SECURITY_DEFINITIONS': {},
    'USE_SESSION_AUTH': False,
}

# Staff session tokens live exactly as long as the daily code.
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=24),
    'SIGNING_KEY': SECRET_KEY,
    'USER_ID_CLAIM': 'staff_id',
}


# =============== LOGGING ===============

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} [{levelname}] {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': os.environ.get('POTTA_LOG_LEVEL', 'INFO'),
    },
    'loggers': {
        'django.db.backends': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
