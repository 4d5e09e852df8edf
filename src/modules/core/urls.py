from django.urls import path, re_path

from modules.core.views import MeView, health_check

urlpatterns = [
    path("health", health_check, name="health_check"),
    re_path(r"^api/me/?$", MeView.as_view(), name="me"),
]
