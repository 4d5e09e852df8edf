from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from django.contrib import admin
from django.urls import include, path, re_path
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("modules.core.urls")),
    # Domain modules
    path("api/", include("modules.categories.urls")),
    path("api/", include("modules.products.urls")),
    path("api/", include("modules.orders.urls")),
    path("api/", include("modules.notifications.urls")),
    # Auth (SimpleJWT)
    re_path(r"^api/auth/token/?$", TokenObtainPairView.as_view(), name="token_obtain"),
    re_path(
        r"^api/auth/token/refresh/?$",
        TokenRefreshView.as_view(),
        name="token_refresh",
    ),
    re_path(
        r"^api/auth/token/verify/?$",
        TokenVerifyView.as_view(),
        name="token_verify",
    ),
    # OpenAPI schema & docs (public)
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
