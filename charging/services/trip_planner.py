from typing import Any

from django.conf import settings

from charging.domain.planner import plan_charging_stops
from charging.domain.types import ChargingStation, ChargingStop, PlannerPolicy, RoutePoint, VehicleProfile
from charging.services.route_sampler import sample_route_points
from charging.services.routing import fetch_route
from charging.services.station_aggregator import fetch_corridor_stations


def planner_policy_from_settings() -> PlannerPolicy:
    return PlannerPolicy(
        min_battery_percent=float(settings.CHARGING_MIN_BATTERY_PERCENT),
        charge_to_percent=float(settings.CHARGING_TARGET_PERCENT),
        insertion_fraction=float(settings.CHARGING_INSERTION_FRACTION),
        corridor_km=float(settings.CHARGING_CORRIDOR_KM),
    )


def serialize_station(station: ChargingStation) -> dict[str, Any]:
    return {
        "id": station.id,
        "source": station.source,
        "name": station.name,
        "operator": station.operator,
        "location": {
            "lat": station.lat,
            "lng": station.lng,
        },
        "address": station.address,
        "country_code": station.country_code,
        "connectors": [
            {
                "type": connector.type,
                "power_kw": connector.power_kw,
                "quantity": connector.quantity,
            }
            for connector in station.connectors
        ],
        "is_fast_charge": station.is_fast_charge,
        "max_power_kw": station.max_power_kw,
        "status": station.status,
    }


def _serialize_stop(stop: ChargingStop, sequence: int) -> dict[str, Any]:
    return {
        "sequence": sequence,
        "distance_from_start_km": round(stop.distance_from_start_km, 3),
        "estimated_battery_on_arrival": round(stop.estimated_battery_on_arrival, 2),
        "station": serialize_station(stop.station),
    }


def plan_route_charging(
    route_points: list[RoutePoint],
    vehicle: VehicleProfile,
    start_battery_percent: float = 100.0,
    stations: list[ChargingStation] | None = None,
    min_power_kw: float | None = None,
) -> dict[str, Any]:
    stations_supplied = stations is not None
    if stations is None:
        stations = fetch_corridor_stations(
            route_points,
            min_power_kw=min_power_kw,
            connector_type=vehicle.connector_type,
        )

    policy = planner_policy_from_settings()
    stops = plan_charging_stops(
        route_points=route_points,
        stations=stations,
        vehicle=vehicle,
        start_battery_percent=start_battery_percent,
        policy=policy,
    )

    return {
        "vehicle": {
            "battery_capacity_kwh": vehicle.battery_capacity_kwh,
            "range_km": vehicle.range_km,
            "connector_type": vehicle.connector_type,
        },
        "start_battery_percent": start_battery_percent,
        "stops": [_serialize_stop(stop, sequence) for sequence, stop in enumerate(stops, start=1)],
        "meta": {
            "route_points": len(route_points),
            "route_distance_km": round(route_points[-1].distance_from_start_km, 3) if route_points else 0.0,
            "candidate_stations_considered": len(stations),
            "stations_supplied_by_caller": stations_supplied,
            "policy": {
                "min_battery_percent": policy.min_battery_percent,
                "charge_to_percent": policy.charge_to_percent,
                "insertion_fraction": policy.insertion_fraction,
                "corridor_km": policy.corridor_km,
            },
            "assumptions": [
                "Charging stops are chosen by a single forward pass, not a global optimum.",
                "Battery drain is linear in distance at the vehicle's rated range.",
                "Each stop charges to the configured target before continuing.",
                "A shortfall with no station inside the corridor is left as a gap in the plan.",
            ],
        },
    }


def build_trip_charging_plan(
    origin_lat: float,
    origin_lng: float,
    destination_lat: float,
    destination_lng: float,
    vehicle: VehicleProfile,
    start_battery_percent: float = 100.0,
    min_power_kw: float | None = None,
) -> dict[str, Any]:
    route = fetch_route(
        start_lat=origin_lat,
        start_lng=origin_lng,
        end_lat=destination_lat,
        end_lng=destination_lng,
    )
    route_points = sample_route_points(route.geometry, spacing_km=float(settings.ROUTE_SAMPLE_SPACING_KM))

    plan = plan_route_charging(
        route_points=route_points,
        vehicle=vehicle,
        start_battery_percent=start_battery_percent,
        min_power_kw=min_power_kw,
    )
    plan["origin"] = {"lat": origin_lat, "lng": origin_lng}
    plan["destination"] = {"lat": destination_lat, "lng": destination_lng}
    plan["route"] = {
        "distance_km": round(route.distance_km, 3),
        "duration_minutes": round(route.duration_minutes, 2),
        "provider": route.provider,
        "geometry": {
            "type": "LineString",
            "coordinates": route.geometry,
        },
    }
    return plan
