from django.http import JsonResponse
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)


def root(_request):
    return JsonResponse(
        {
            "service": "evtrip-api",
            "status": "ok",
            "endpoints": {
                "station_search": {
                    "method": "GET",
                    "path": "/api/charging/stations/",
                },
                "charging_plan": {
                    "method": "POST",
                    "path": "/api/charging/plan/",
                },
                "trip_plan": {
                    "method": "POST",
                    "path": "/api/trip-plan/",
                },
                "schema": "/api/schema/",
                "swagger_ui": "/api/docs/swagger/",
                "redoc": "/api/docs/redoc/",
            },
        }
    )


urlpatterns = [
    path("", root),
    path("api/", include("charging.api.urls")),
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path(
        "api/docs/swagger/",
        SpectacularSwaggerView.as_view(url_name="api-schema"),
        name="api-docs-swagger",
    ),
    path(
        "api/docs/redoc/",
        SpectacularRedocView.as_view(url_name="api-schema"),
        name="api-docs-redoc",
    ),
]
