import logging

from charging.domain.distance import haversine_km
from charging.domain.types import ChargingStation, ChargingStop, PlannerPolicy, RoutePoint, VehicleProfile

logger = logging.getLogger(__name__)

EPSILON = 1e-9


class ChargingPlanError(Exception):
    pass


def nearest_route_point(route_points: list[RoutePoint], target_km: float) -> RoutePoint:
    """Route point whose cumulative distance is closest to ``target_km``; earliest wins ties."""
    if not route_points:
        raise ChargingPlanError("Cannot snap to an empty route")

    best = route_points[0]
    for point in route_points[1:]:
        if abs(point.distance_from_start_km - target_km) < abs(best.distance_from_start_km - target_km):
            best = point
    return best


def rank_stations(
    stations: list[ChargingStation],
    lat: float,
    lng: float,
    corridor_km: float,
) -> list[tuple[ChargingStation, float]]:
    ranked: list[tuple[ChargingStation, float]] = []
    for station in stations:
        distance = haversine_km(lat, lng, station.lat, station.lng)
        if distance < corridor_km:
            ranked.append((station, distance))

    ranked.sort(key=lambda item: (0 if item[0].is_fast_charge else 1, item[1]))
    return ranked


def _validate_inputs(
    route_points: list[RoutePoint],
    vehicle: VehicleProfile,
    start_battery_percent: float,
    policy: PlannerPolicy,
):
    if vehicle.range_km <= 0:
        raise ChargingPlanError("Vehicle range must be greater than zero")
    if not 0 <= start_battery_percent <= 100:
        raise ChargingPlanError("Start battery percent must be between 0 and 100")
    if not 0 <= policy.min_battery_percent < policy.charge_to_percent <= 100:
        raise ChargingPlanError("Charge target must be above the battery floor and at most 100")
    if not 0 < policy.insertion_fraction <= 1:
        raise ChargingPlanError("Insertion fraction must be within (0, 1]")

    for idx in range(1, len(route_points)):
        if route_points[idx].distance_from_start_km < route_points[idx - 1].distance_from_start_km - EPSILON:
            raise ChargingPlanError("Route points are not ordered by distance from start")


def plan_charging_stops(
    route_points: list[RoutePoint],
    stations: list[ChargingStation],
    vehicle: VehicleProfile,
    start_battery_percent: float = 100.0,
    policy: PlannerPolicy | None = None,
) -> list[ChargingStop]:
    """Walk the route once and insert a stop wherever the battery would hit the floor.

    A shortfall with no station inside the corridor is left unresolved; the
    returned plan is best-effort and may contain gaps.
    """
    policy = policy or PlannerPolicy()
    _validate_inputs(route_points, vehicle, start_battery_percent, policy)
    if len(route_points) < 2:
        return []

    km_per_percent = vehicle.km_per_percent
    current_battery = float(start_battery_percent)
    last_stop_km = 0.0
    stops: list[ChargingStop] = []

    for point in route_points[1:]:
        segment_km = point.distance_from_start_km - last_stop_km
        projected_battery = current_battery - segment_km / km_per_percent
        if projected_battery > policy.min_battery_percent:
            continue

        target_km = last_stop_km + segment_km * policy.insertion_fraction
        snapped = nearest_route_point(route_points, target_km)
        ranked = rank_stations(stations, snapped.lat, snapped.lng, policy.corridor_km)
        if not ranked:
            logger.info(
                "No charging station within %.1f km of route km %.1f; leaving shortfall unresolved",
                policy.corridor_km,
                snapped.distance_from_start_km,
            )
            continue

        battery_on_arrival = current_battery - (snapped.distance_from_start_km - last_stop_km) / km_per_percent
        stops.append(
            ChargingStop(
                station=ranked[0][0],
                distance_from_start_km=snapped.distance_from_start_km,
                estimated_battery_on_arrival=min(100.0, max(0.0, battery_on_arrival)),
            )
        )

        current_battery = policy.charge_to_percent
        last_stop_km = snapped.distance_from_start_km

    return stops
