from .base import *

DEBUG = True

try:
    import debug_toolbar
    INSTALLED_APPS += ['debug_toolbar']
    MIDDLEWARE.insert(1, 'debug_toolbar.middleware.DebugToolbarMiddleware')
except ImportError:
    pass

INTERNAL_IPS = ['127.0.0.1']

# Verbose wizard logging while building step pages
LOGGING['loggers']['apps.workflow']['level'] = 'DEBUG'

SITE_URL = 'http://127.0.0.1:8000'
