"""
URL configuration for the guided booking checkout.
"""
from django.contrib import admin
from django.conf import settings
from django.urls import path, include

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path('shop/', include('apps.catalog.urls', namespace='catalog')),
    path('checkout/', include('apps.orders.urls', namespace='orders')),
    path('checkout-wizard/', include('apps.workflow.urls', namespace='workflow')),
    path('', include('apps.pages.urls', namespace='pages')),
]

if settings.DEBUG:
    try:
        import debug_toolbar
        urlpatterns = [path('__debug__/', include(debug_toolbar.urls))] + urlpatterns
    except ImportError:
        pass
