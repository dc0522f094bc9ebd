from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from .views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check),  # Health check endpoint

    # Role-scoped order APIs
    path('api/customer/', include('customers.urls')),
    path('api/driver/', include('drivers.urls')),
    path('api/store/', include('stores.urls')),

    # Shared: pricing, map-link resolver, proofs, reports
    path('api/', include('orders.urls')),
    path('api/', include('reports.urls')),

    # Ticket ledger
    path('api/tickets/', include('tickets.urls')),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
