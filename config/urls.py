# config/urls.py
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path("api/v1/auth/token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("api/v1/auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),

    path("api/v1/pdv/", include(("vendas.urls", "vendas"), namespace="vendas")),
    path("api/v1/caixa/", include(("caixa.urls", "caixa"), namespace="caixa")),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("", include("commons.urls")),
]
