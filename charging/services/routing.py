import hashlib
import logging
from dataclasses import dataclass

import requests
from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

KM_PER_METER = 0.001
ROUTE_CACHE_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class RouteResult:
    distance_km: float
    duration_minutes: float
    geometry: list[list[float]]
    provider: str


class RoutingError(Exception):
    pass


def _cache_key(points: list[tuple[float, float]]) -> str:
    serialized = ";".join(f"{round(lat, 5)}:{round(lng, 5)}" for lat, lng in points)
    return f"route::{hashlib.sha256(f'osrm::{serialized}'.encode('utf-8')).hexdigest()}"


def _dedupe_consecutive_points(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    deduped: list[tuple[float, float]] = []
    for point in points:
        if deduped and abs(deduped[-1][0] - point[0]) < 1e-7 and abs(deduped[-1][1] - point[1]) < 1e-7:
            continue
        deduped.append(point)
    return deduped


def _fetch_osrm_route(points: list[tuple[float, float]]) -> RouteResult:
    coordinate_string = ";".join(f"{lng},{lat}" for lat, lng in points)
    response = requests.get(
        f"{settings.OSRM_API_BASE_URL}/route/v1/driving/{coordinate_string}",
        params={
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        },
        timeout=settings.EXTERNAL_API_TIMEOUT_SECONDS,
    )
    response.raise_for_status()
    payload = response.json()

    if payload.get("code") != "Ok" or not payload.get("routes"):
        message = payload.get("message", "route not available")
        raise RoutingError(f"OSRM directions failed: {message}")

    route = payload["routes"][0]
    return RouteResult(
        distance_km=float(route["distance"]) * KM_PER_METER,
        duration_minutes=float(route["duration"]) / 60.0,
        geometry=route["geometry"]["coordinates"],
        provider="osrm",
    )


def fetch_route_through_points(points: list[tuple[float, float]]) -> RouteResult:
    """Driving route through ``(lat, lng)`` points, in order."""
    normalized_points = _dedupe_consecutive_points(points)
    if len(normalized_points) < 2:
        raise RoutingError("At least two coordinates are required to build a route")

    key = _cache_key(normalized_points)
    cached = cache.get(key)
    if cached:
        return cached

    result = _fetch_osrm_route(normalized_points)
    logger.info("Fetched %.1f km route with %d geometry points", result.distance_km, len(result.geometry))
    cache.set(key, result, timeout=ROUTE_CACHE_SECONDS)
    return result


def fetch_route(start_lat: float, start_lng: float, end_lat: float, end_lng: float) -> RouteResult:
    return fetch_route_through_points(points=[(start_lat, start_lng), (end_lat, end_lng)])
