"""URL configuration for Meetpoint.

The `urlpatterns` list routes URLs to the admin and to the application
level routers of each domain app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/invites/', include('apps.invites.urls')),
    path('api/v1/credits/', include('apps.credits.urls')),
    path('api/v1/finances/', include('apps.finances.urls')),
]
