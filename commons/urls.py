from django.urls import path

from .views.commons_views import liveness, readiness

urlpatterns = [
    path("health/liveness", liveness, name="health-liveness"),
    path("health/readiness", readiness, name="health-readiness"),
]
