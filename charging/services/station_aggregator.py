import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings
from django.core.cache import cache

from charging.domain.merge import merge_station_batches
from charging.domain.types import ChargingStation, RoutePoint, StationSearch
from charging.services.providers.base import SourceResult, StationSource
from charging.services.providers.registry import get_station_sources

logger = logging.getLogger(__name__)


def _cache_key(search: StationSearch, sources: list[StationSource]) -> str:
    serialized = ":".join(
        [
            ",".join(source.provider_id for source in sources),
            f"{round(search.lat, 4)}",
            f"{round(search.lng, 4)}",
            f"{search.radius_km}",
            f"{search.min_power_kw or ''}",
            f"{(search.connector_type or '').lower()}",
        ]
    )
    return f"stations::{hashlib.sha256(serialized.encode('utf-8')).hexdigest()}"


def collect_source_results(
    search: StationSearch,
    sources: list[StationSource],
) -> list[SourceResult]:
    """Run every source concurrently; results come back in source order."""
    if not sources:
        return []

    with ThreadPoolExecutor(max_workers=len(sources), thread_name_prefix="station-source") as executor:
        futures = [executor.submit(source.search_result, search) for source in sources]
        return [future.result() for future in futures]


def _source_batches(
    search: StationSearch,
    sources: list[StationSource],
    use_cache: bool = True,
) -> list[list[ChargingStation]]:
    """Per-source station lists for one search, in source order."""
    key = _cache_key(search, sources)
    if use_cache:
        cached = cache.get(key)
        if cached is not None:
            return cached

    results = collect_source_results(search, sources)
    batches = [result.stations for result in results]
    failed = [source.provider_id for source, result in zip(sources, results) if not result.ok]
    logger.info(
        "Station search at (%.4f, %.4f) r=%.1f km: %s",
        search.lat,
        search.lng,
        search.radius_km,
        {source.provider_id: len(batch) for source, batch in zip(sources, batches)},
    )

    if failed:
        logger.info("Not caching station search: %s did not answer", ", ".join(failed))
    elif use_cache:
        cache.set(key, batches, timeout=settings.STATION_CACHE_SECONDS)
    return batches


def search_charging_stations(
    search: StationSearch,
    sources: list[StationSource] | None = None,
    use_cache: bool = True,
) -> list[ChargingStation]:
    if sources is None:
        sources = get_station_sources()

    batches = _source_batches(search, sources, use_cache=use_cache)
    return merge_station_batches(batches, tolerance_degrees=settings.STATION_DEDUP_TOLERANCE_DEGREES)


def _search_centers(route_points: list[RoutePoint], spacing_km: float, max_centers: int) -> list[RoutePoint]:
    if not route_points:
        return []

    centers = [route_points[0]]
    for point in route_points[1:]:
        if point.distance_from_start_km - centers[-1].distance_from_start_km >= spacing_km:
            centers.append(point)
    if centers[-1] is not route_points[-1]:
        centers.append(route_points[-1])

    if len(centers) <= max_centers:
        return centers

    step = len(centers) / max_centers
    thinned = [centers[int(idx * step)] for idx in range(max_centers - 1)]
    thinned.append(centers[-1])
    return thinned


def fetch_corridor_stations(
    route_points: list[RoutePoint],
    radius_km: float | None = None,
    min_power_kw: float | None = None,
    connector_type: str | None = None,
    sources: list[StationSource] | None = None,
) -> list[ChargingStation]:
    """Aggregate stations at spaced centres along the route into one candidate set."""
    if radius_km is None:
        radius_km = float(settings.CHARGING_SEARCH_RADIUS_KM)
    if sources is None:
        sources = get_station_sources()

    centers = _search_centers(
        route_points,
        spacing_km=float(settings.CHARGING_SEARCH_SPACING_KM),
        max_centers=int(settings.CHARGING_MAX_SEARCH_CENTERS),
    )
    # Each source keeps its own list across centres so source priority still decides duplicates.
    per_source: list[list[ChargingStation]] = [[] for _ in sources]
    seen_ids: list[set[str]] = [set() for _ in sources]
    for center in centers:
        search = StationSearch(
            lat=center.lat,
            lng=center.lng,
            radius_km=radius_km,
            min_power_kw=min_power_kw,
            connector_type=connector_type,
        )
        for idx, batch in enumerate(_source_batches(search, sources)):
            for station in batch:
                if station.id not in seen_ids[idx]:
                    seen_ids[idx].add(station.id)
                    per_source[idx].append(station)

    return merge_station_batches(per_source, tolerance_degrees=settings.STATION_DEDUP_TOLERANCE_DEGREES)
