"""Root URL configuration.

All API routes live under /api/. Each app contributes its own urlpatterns.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("common.api.urls")),
    path("api/", include("user_auth_app.api.urls")),
    path("api/", include("profiles.api.urls")),
    path("api/", include("catalog.api.urls")),
    path("api/", include("orders.api.urls")),
]
