import os

os.environ.setdefault('SECRET_KEY', 'test-only-secret-key')

from .base import *  # noqa: E402

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.InMemoryStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

WIZARD_WORKFLOW_PAGES = {
    'step_1': 'booking-selection',
    'step_2': 'booking-information',
    'step_3': 'booking-signature',
    'step_4': 'booking-confirmation',
}
WIZARD_SESSION_TTL = 1200
WIZARD_VERSION = '2.1'
WIZARD_REQUIRED_FIELDS = ['field_1', 'field_2']
WIZARD_REDIRECT_CHECKOUT = True
