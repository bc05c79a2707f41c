import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from requests import RequestException

from charging.domain.types import ChargingConnector, ChargingStation, StationSearch
from charging.services.rate_limit import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

FAST_CHARGE_MIN_KW = 50.0

# Payload problems surface as one of these while normalizing provider JSON.
PROVIDER_ERRORS = (RequestException, ValueError, KeyError, TypeError, AttributeError)


@dataclass(frozen=True)
class SourceResult:
    stations: list[ChargingStation]
    # False when the provider failed or was rate limited; such results are not cached.
    ok: bool = True


class StationSource(ABC):
    """One external charging-data provider.

    Subclasses implement ``fetch`` (network) and ``normalize`` (pure).
    ``search`` owns the contract shared by every provider: it never raises,
    and any failure means "no candidates from this source".
    """

    provider_id: str = ""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout_seconds: float,
        max_results: int = 50,
        rate_limiter: FixedWindowRateLimiter | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.max_results = max_results
        self.rate_limiter = rate_limiter

    @abstractmethod
    def fetch(self, search: StationSearch) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    def normalize(self, raw: dict[str, Any]) -> ChargingStation:
        ...

    def search(self, search: StationSearch) -> list[ChargingStation]:
        return self.search_result(search).stations

    def search_result(self, search: StationSearch) -> SourceResult:
        """Like ``search``, but also reports whether the provider actually answered."""
        if not self.api_key:
            logger.debug("Skipping %s station search: no API key configured", self.provider_id)
            return SourceResult(stations=[], ok=True)

        if self.rate_limiter is not None and not self.rate_limiter.acquire(self.provider_id):
            logger.warning(
                "Skipping %s station search: rate limit reached, window resets in %.0fs",
                self.provider_id,
                self.rate_limiter.seconds_until_reset(self.provider_id),
            )
            return SourceResult(stations=[], ok=False)

        try:
            stations = [self.normalize(raw) for raw in self.fetch(search)]
            filtered = filter_stations(stations, search.min_power_kw, search.connector_type)
        except PROVIDER_ERRORS as exc:
            logger.warning("%s station search failed: %s", self.provider_id, exc)
            return SourceResult(stations=[], ok=False)

        logger.debug(
            "%s returned %d stations (%d after filters)",
            self.provider_id,
            len(stations),
            len(filtered),
        )
        return SourceResult(stations=filtered[: self.max_results], ok=True)

    def station_id(self, native_id: Any) -> str:
        return f"{self.provider_id}-{native_id}"


def summarize_connectors(connectors: list[ChargingConnector]) -> tuple[bool, float | None]:
    """Return ``(is_fast_charge, max_power_kw)`` for a station's connectors."""
    max_power = max((connector.power_kw or 0.0 for connector in connectors), default=0.0)
    return max_power >= FAST_CHARGE_MIN_KW, (max_power if max_power > 0 else None)


def join_address(*parts: str | None) -> str:
    return ", ".join(str(part) for part in parts if part)


def filter_stations(
    stations: list[ChargingStation],
    min_power_kw: float | None,
    connector_type: str | None,
) -> list[ChargingStation]:
    needle = connector_type.strip().lower() if connector_type else ""
    selected: list[ChargingStation] = []
    for station in stations:
        if min_power_kw and (station.max_power_kw or 0.0) < min_power_kw:
            continue
        if needle and not any(needle in str(connector.type).lower() for connector in station.connectors):
            continue
        selected.append(station)
    return selected
