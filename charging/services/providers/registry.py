from functools import lru_cache

from django.conf import settings

from charging.services.providers.base import StationSource
from charging.services.providers.nobil import NobilSource
from charging.services.providers.ocm import OpenChargeMapSource
from charging.services.rate_limit import FixedWindowRateLimiter

SOURCE_CLASSES: dict[str, type[StationSource]] = {
    OpenChargeMapSource.provider_id: OpenChargeMapSource,
    NobilSource.provider_id: NobilSource,
}


@lru_cache(maxsize=1)
def get_provider_rate_limiter() -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(
        max_requests=settings.PROVIDER_RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.PROVIDER_RATE_LIMIT_WINDOW_SECONDS,
    )


def _source_settings(provider_id: str) -> tuple[str, str]:
    if provider_id == OpenChargeMapSource.provider_id:
        return settings.OCM_API_KEY, settings.OCM_API_BASE_URL
    return settings.NOBIL_API_KEY, settings.NOBIL_API_BASE_URL


def get_station_sources(rate_limiter: FixedWindowRateLimiter | None = None) -> list[StationSource]:
    """Configured sources in priority order; the first one is the primary source."""
    if rate_limiter is None:
        rate_limiter = get_provider_rate_limiter()

    sources: list[StationSource] = []
    for provider_id in settings.CHARGING_STATION_SOURCES:
        source_class = SOURCE_CLASSES.get(provider_id)
        if source_class is None:
            continue
        api_key, base_url = _source_settings(provider_id)
        sources.append(
            source_class(
                api_key=api_key,
                base_url=base_url,
                timeout_seconds=settings.EXTERNAL_API_TIMEOUT_SECONDS,
                max_results=settings.CHARGING_MAX_RESULTS,
                rate_limiter=rate_limiter,
            )
        )
    return sources
