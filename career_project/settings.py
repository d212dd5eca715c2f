"""
Django settings for career_project.

All deployment-specific values come from the environment (or a local .env file)
through django-environ. Career engine tuning knobs are prefixed with CAREER_.
"""
import os
from decimal import Decimal
from pathlib import Path

import environ

# ======================== Base Dir & Env ========================
BASE_DIR = Path(__file__).resolve().parent.parent
env = environ.Env()
environ.Env.read_env(os.path.join(BASE_DIR, '.env'))

SECRET_KEY = env('DJANGO_SECRET_KEY', default='django-insecure-career-dev-key-change-me')

DEBUG = env.bool('DEBUG', default=False)
ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=['localhost', '127.0.0.1'])

# ======================== Applications ========================
INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django.contrib.sessions',
    'rest_framework',

    # Core
    'core.user_accounts',

    # HR
    'HR.work_structures',
    'HR.person',
    'HR.career',
    'HR.employee_requests',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
]

ROOT_URLCONF = 'career_project.urls'
WSGI_APPLICATION = 'career_project.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
            ],
        },
    },
]

# ======================== Database ========================
DATABASES = {
    'default': env.db('DATABASE_URL', default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
}

AUTH_USER_MODEL = 'user_accounts.CustomUser'

# ======================== REST Framework ========================
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_RENDERER_CLASSES': [
        'career_project.response_formatter.StandardizedJSONRenderer',
    ],
    'EXCEPTION_HANDLER': 'career_project.response_formatter.custom_exception_handler',
}

# ======================== Career Engine ========================
# Penalty subtracted per missing level of an unmet mandatory skill (scaled by weight)
CAREER_MANDATORY_PENALTY_FACTOR = Decimal(env('CAREER_MANDATORY_PENALTY_FACTOR', default='0.1'))
CAREER_RANKING_MAX_WORKERS = env.int('CAREER_RANKING_MAX_WORKERS', default=4)
CAREER_RANKING_PARALLEL_THRESHOLD = env.int('CAREER_RANKING_PARALLEL_THRESHOLD', default=200)
CAREER_SUCCESSION_MIN_SCORE = Decimal(env('CAREER_SUCCESSION_MIN_SCORE', default='60'))
CAREER_NOTIFICATION_BACKEND = env(
    'CAREER_NOTIFICATION_BACKEND',
    default='HR.employee_requests.notifications.LoggingNotificationBackend',
)

# ======================== Logging ========================
LOG_LEVEL = env('LOG_LEVEL', default='INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} [{levelname}] {name}: {message}',
            'style': '{'
        },
        'simple': {
            'format': '[{levelname}] {message}',
            'style': '{'
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': True,
        },
        'core': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'HR': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'career_project': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}

# ======================== Defaults ========================
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
STATIC_URL = 'static/'
