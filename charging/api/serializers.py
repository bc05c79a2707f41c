from django.conf import settings
from rest_framework import serializers

from charging.domain.types import ChargingConnector, ChargingStation, RoutePoint, StationSearch, VehicleProfile
from charging.services.providers.base import summarize_connectors


class StationSearchSerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    radius_km = serializers.FloatField(default=settings.CHARGING_SEARCH_RADIUS_KM, min_value=0.1, max_value=500)
    min_power_kw = serializers.FloatField(min_value=0, required=False, allow_null=True)
    connector_type = serializers.CharField(max_length=64, required=False, allow_blank=True)

    def to_search(self) -> StationSearch:
        data = self.validated_data
        return StationSearch(
            lat=data["lat"],
            lng=data["lng"],
            radius_km=data["radius_km"],
            min_power_kw=data.get("min_power_kw"),
            connector_type=data.get("connector_type") or None,
        )


class VehicleProfileSerializer(serializers.Serializer):
    battery_capacity_kwh = serializers.FloatField(min_value=1)
    range_km = serializers.FloatField(min_value=1)
    connector_type = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)

    @staticmethod
    def to_profile(data: dict) -> VehicleProfile:
        return VehicleProfile(
            battery_capacity_kwh=data["battery_capacity_kwh"],
            range_km=data["range_km"],
            connector_type=data.get("connector_type") or None,
        )


class CoordinateSerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)


class RoutePointSerializer(CoordinateSerializer):
    distance_from_start_km = serializers.FloatField(min_value=0)


class ConnectorSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=128)
    power_kw = serializers.FloatField(min_value=0, required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1, default=1)


class StationSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=128)
    source = serializers.CharField(max_length=32, default="external")
    name = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    operator = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    location = CoordinateSerializer()
    address = serializers.CharField(max_length=512, required=False, allow_null=True, allow_blank=True)
    country_code = serializers.CharField(max_length=8, required=False, allow_null=True, allow_blank=True)
    connectors = ConnectorSerializer(many=True, default=list)
    is_fast_charge = serializers.BooleanField(required=False, allow_null=True)
    max_power_kw = serializers.FloatField(min_value=0, required=False, allow_null=True)
    status = serializers.CharField(max_length=64, required=False, allow_null=True, allow_blank=True)

    @staticmethod
    def to_station(data: dict) -> ChargingStation:
        connectors = [
            ChargingConnector(
                type=connector["type"],
                power_kw=connector.get("power_kw"),
                quantity=connector["quantity"],
            )
            for connector in data["connectors"]
        ]
        # Omitted flags are derived from the connectors, as the provider adapters do.
        derived_fast, derived_max_power = summarize_connectors(connectors)
        is_fast_charge = data.get("is_fast_charge")
        max_power_kw = data.get("max_power_kw")
        return ChargingStation(
            id=data["id"],
            source=data["source"],
            name=data.get("name"),
            operator=data.get("operator"),
            lat=data["location"]["lat"],
            lng=data["location"]["lng"],
            address=data.get("address"),
            country_code=data.get("country_code"),
            connectors=tuple(connectors),
            is_fast_charge=derived_fast if is_fast_charge is None else is_fast_charge,
            max_power_kw=derived_max_power if max_power_kw is None else max_power_kw,
            status=data.get("status"),
        )


class ChargingPlanRequestSerializer(serializers.Serializer):
    route_points = RoutePointSerializer(many=True, allow_empty=True)
    vehicle = VehicleProfileSerializer()
    start_battery_percent = serializers.FloatField(default=100.0, min_value=0, max_value=100)
    min_power_kw = serializers.FloatField(min_value=0, required=False, allow_null=True)
    stations = StationSerializer(many=True, required=False, allow_null=True)

    def build_route_points(self) -> list[RoutePoint]:
        return [
            RoutePoint(
                lat=point["lat"],
                lng=point["lng"],
                distance_from_start_km=point["distance_from_start_km"],
            )
            for point in self.validated_data["route_points"]
        ]

    def build_stations(self) -> list[ChargingStation] | None:
        raw_stations = self.validated_data.get("stations")
        if raw_stations is None:
            return None
        return [StationSerializer.to_station(station) for station in raw_stations]


class TripPlanRequestSerializer(serializers.Serializer):
    origin = CoordinateSerializer()
    destination = CoordinateSerializer()
    vehicle = VehicleProfileSerializer()
    start_battery_percent = serializers.FloatField(default=100.0, min_value=0, max_value=100)
    min_power_kw = serializers.FloatField(min_value=0, required=False, allow_null=True)
