from django.urls import path

from charging.api.views import ChargingPlanView, StationSearchView, TripPlanView

urlpatterns = [
    path("charging/stations/", StationSearchView.as_view(), name="charging-stations"),
    path("charging/plan/", ChargingPlanView.as_view(), name="charging-plan"),
    path("trip-plan/", TripPlanView.as_view(), name="trip-plan"),
]
