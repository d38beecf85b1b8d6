"""
WSGI config for the guided booking checkout.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'checkout_wizard.settings.production')

application = get_wsgi_application()
