# inoflow/settings.py
import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_int(name, default):
    value = os.environ.get(name, '').strip()
    return int(value) if value else default


SECRET_KEY = os.environ.get('INOFLOW_SECRET_KEY', 'dev-only-insecure-key')
DEBUG = env_bool('INOFLOW_DEBUG', default=True)
ALLOWED_HOSTS = [h.strip() for h in os.environ.get('INOFLOW_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h.strip()]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'django_filters',

    # Nasze aplikacje
    'apps.core',
    'apps.clients',
    'apps.tasks',
    'apps.notes',
    'apps.notifications',
    'apps.realtime',
    'apps.integrations',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'inoflow.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'inoflow.wsgi.application'


DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('INOFLOW_DB_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'apps.core.validators.LetterAndDigitPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('INOFLOW_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

# Załączniki (object storage)
MEDIA_ROOT = os.environ.get('INOFLOW_MEDIA_ROOT', str(BASE_DIR / 'media'))
MEDIA_URL = os.environ.get('INOFLOW_MEDIA_URL', '/media/')
ATTACHMENTS_DIR = 'attachments'


# E-mail: SMTP jeśli skonfigurowany, w przeciwnym razie konsola
DEFAULT_FROM_EMAIL = os.environ.get('INOFLOW_MAIL_FROM', 'no-reply@inoflow.local')
EMAIL_HOST = os.environ.get('INOFLOW_SMTP_HOST', '')
EMAIL_PORT = env_int('INOFLOW_SMTP_PORT', 587)
EMAIL_HOST_USER = os.environ.get('INOFLOW_SMTP_USER', '')
EMAIL_HOST_PASSWORD = os.environ.get('INOFLOW_SMTP_PASSWORD', '')
EMAIL_USE_SSL = EMAIL_PORT == 465
EMAIL_USE_TLS = not EMAIL_USE_SSL
if EMAIL_HOST:
    EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
else:
    EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'


# Integracja z systemem automatyzacji (webhooki)
AUTOMATION_WEBHOOK_URL = os.environ.get('AUTOMATION_WEBHOOK_URL', '')
AUTOMATION_WEBHOOK_SECRET = os.environ.get('AUTOMATION_WEBHOOK_SECRET', '')
AUTOMATION_API_KEY = os.environ.get('AUTOMATION_API_KEY', '')
AUTOMATION_TIMEOUT_SECONDS = env_int('AUTOMATION_TIMEOUT_SECONDS', 10)


# Parametry list i dashboardu
DASHBOARD_COMPLETED_WINDOW_DAYS = env_int('DASHBOARD_COMPLETED_WINDOW_DAYS', 7)
NOTIFICATIONS_DEFAULT_LIMIT = env_int('NOTIFICATIONS_DEFAULT_LIMIT', 50)
TASKS_MAX_LIMIT = env_int('TASKS_MAX_LIMIT', 1000)

# Realtime: ile zdarzeń może czekać w kolejce jednej subskrypcji
REALTIME_QUEUE_SIZE = env_int('REALTIME_QUEUE_SIZE', 256)
REALTIME_KEEPALIVE_SECONDS = env_int('REALTIME_KEEPALIVE_SECONDS', 25)


LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'default',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': os.environ.get('INOFLOW_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
