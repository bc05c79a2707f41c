import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiResponse, extend_schema
from requests import HTTPError, RequestException
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from charging.api.serializers import (
    ChargingPlanRequestSerializer,
    StationSearchSerializer,
    TripPlanRequestSerializer,
    VehicleProfileSerializer,
)
from charging.domain.planner import ChargingPlanError
from charging.services.routing import RoutingError
from charging.services.station_aggregator import search_charging_stations
from charging.services.trip_planner import build_trip_charging_plan, plan_route_charging, serialize_station

logger = logging.getLogger(__name__)


class StationSearchView(APIView):
    @extend_schema(
        parameters=[StationSearchSerializer],
        responses={
            200: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Merged charging stations."),
            400: OpenApiResponse(description="Invalid search parameters."),
        },
    )
    def get(self, request):
        serializer = StationSearchSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        stations = search_charging_stations(serializer.to_search())
        return Response([serialize_station(station) for station in stations], status=status.HTTP_200_OK)


class ChargingPlanView(APIView):
    @extend_schema(
        request=ChargingPlanRequestSerializer,
        responses={
            200: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Charging stops along the route."),
            400: OpenApiResponse(description="Validation or planning error."),
        },
    )
    def post(self, request):
        serializer = ChargingPlanRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = serializer.validated_data
        try:
            result = plan_route_charging(
                route_points=serializer.build_route_points(),
                vehicle=VehicleProfileSerializer.to_profile(payload["vehicle"]),
                start_battery_percent=payload["start_battery_percent"],
                stations=serializer.build_stations(),
                min_power_kw=payload.get("min_power_kw"),
            )
        except ChargingPlanError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(result, status=status.HTTP_200_OK)


class TripPlanView(APIView):
    @extend_schema(
        request=TripPlanRequestSerializer,
        responses={
            200: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Trip route with charging stops."),
            400: OpenApiResponse(description="Validation, routing or planning error."),
            502: OpenApiResponse(description="Upstream API/network error."),
        },
    )
    def post(self, request):
        serializer = TripPlanRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = serializer.validated_data
        try:
            result = build_trip_charging_plan(
                origin_lat=payload["origin"]["lat"],
                origin_lng=payload["origin"]["lng"],
                destination_lat=payload["destination"]["lat"],
                destination_lng=payload["destination"]["lng"],
                vehicle=VehicleProfileSerializer.to_profile(payload["vehicle"]),
                start_battery_percent=payload["start_battery_percent"],
                min_power_kw=payload.get("min_power_kw"),
            )
        except (RoutingError, ChargingPlanError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except HTTPError as exc:
            logger.warning("Routing provider returned an error: %s", exc)
            return Response(
                {"detail": f"External API error: {exc}"},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        except RequestException as exc:
            logger.warning("Network error while calling routing provider: %s", exc)
            return Response(
                {"detail": f"Network error while calling external service: {exc}"},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        return Response(result, status=status.HTTP_200_OK)
