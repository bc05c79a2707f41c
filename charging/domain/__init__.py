from charging.domain.merge import merge_station_batches, merge_station_lists
from charging.domain.planner import ChargingPlanError, nearest_route_point, plan_charging_stops, rank_stations
from charging.domain.types import (
    ChargingConnector,
    ChargingStation,
    ChargingStop,
    PlannerPolicy,
    RoutePoint,
    StationSearch,
    VehicleProfile,
)

__all__ = [
    "ChargingConnector",
    "ChargingPlanError",
    "ChargingStation",
    "ChargingStop",
    "PlannerPolicy",
    "RoutePoint",
    "StationSearch",
    "VehicleProfile",
    "merge_station_batches",
    "merge_station_lists",
    "nearest_route_point",
    "plan_charging_stops",
    "rank_stations",
]
