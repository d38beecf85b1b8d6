"""
Base settings for the guided booking checkout.
"""
from pathlib import Path
from decouple import config, Csv
import dj_database_url

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = config('SECRET_KEY')

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=Csv())

DJANGO_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

LOCAL_APPS = [
    'apps.core',
    'apps.catalog',
    'apps.pages',
    'apps.orders',
    'apps.workflow',
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    # Must come after sessions + messages: the guards read the session
    # and leave notices for the shopper.
    'apps.workflow.middleware.WorkflowMiddleware',
    'apps.workflow.middleware.WorkflowGuardMiddleware',
]

ROOT_URLCONF = 'checkout_wizard.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
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

WSGI_APPLICATION = 'checkout_wizard.wsgi.application'

DATABASES = {
    'default': dj_database_url.config(
        default=config('DATABASE_URL', default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}"),
        conn_max_age=600
    )
}

CSRF_TRUSTED_ORIGINS = config('CSRF_TRUSTED_ORIGINS', default='http://localhost:8000', cast=Csv())

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = config('TIME_ZONE', default='UTC')
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage'},
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ── Sessions ───────────────────────────────────────────────────────────────────
# The wizard keeps its own expiry inside the session blob; the cookie itself
# lives long enough to carry the cart between visits.
SESSION_COOKIE_AGE = 60 * 60 * 24 * 2

# ── Checkout wizard ────────────────────────────────────────────────────────────
# Content page slug for each wizard step.
WIZARD_WORKFLOW_PAGES = {
    'step_1': config('WIZARD_STEP_1_PAGE', default='booking-selection'),
    'step_2': config('WIZARD_STEP_2_PAGE', default='booking-information'),
    'step_3': config('WIZARD_STEP_3_PAGE', default='booking-signature'),
    'step_4': config('WIZARD_STEP_4_PAGE', default='booking-confirmation'),
}
WIZARD_SESSION_TTL = config('WIZARD_SESSION_TTL', default=1200, cast=int)   # seconds, 300-3600
WIZARD_VERSION = config('WIZARD_VERSION', default='1.0')
WIZARD_REQUIRED_FIELDS = config('WIZARD_REQUIRED_FIELDS', default='field_1,field_2', cast=Csv())
WIZARD_REDIRECT_CHECKOUT = config('WIZARD_REDIRECT_CHECKOUT', default=True, cast=bool)
WIZARD_LOG_LEVEL = config('WIZARD_LOG_LEVEL', default='info').upper()

# ── Logging ────────────────────────────────────────────────────────────────────
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{asctime}] {levelname} {name}: {message}',
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
        'level': 'WARNING',
    },
    'loggers': {
        'apps.workflow': {
            'handlers': ['console'],
            'level': WIZARD_LOG_LEVEL,
            'propagate': False,
        },
        'apps.orders': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

# ── Admin URL ──────────────────────────────────────────────────────────────────
ADMIN_URL = config('ADMIN_URL', default='secret-admin/')
