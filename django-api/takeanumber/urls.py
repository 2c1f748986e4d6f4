from django.contrib import admin
from django.urls import include, path

from queues.handlers import HealthView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("queues.urls")),
    path("health", HealthView.as_view(), name="health"),
]
