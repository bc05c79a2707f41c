import re
from typing import Any

import requests

from charging.domain.types import ChargingConnector, ChargingStation, StationSearch
from charging.services.providers.base import StationSource, join_address, summarize_connectors

POSITION_RE = re.compile(r"\(\s*(?P<lat>-?[0-9.]+)\s*,\s*(?P<lng>-?[0-9.]+)\s*\)")
POWER_RE = re.compile(r"(?P<kw>\d+(?:\.\d+)?)\s*kW", re.IGNORECASE)
CONNECTOR_ATTR_TYPE_ID = "4"
METERS_PER_KM = 1000


def _parse_position(value: str | None) -> tuple[float, float]:
    match = POSITION_RE.search(str(value or ""))
    if not match:
        return 0.0, 0.0
    return float(match.group("lat")), float(match.group("lng"))


def _parse_power_kw(value: str | None) -> float | None:
    match = POWER_RE.search(str(value or ""))
    if not match:
        return None
    return float(match.group("kw"))


class NobilSource(StationSource):
    provider_id = "nobil"

    def fetch(self, search: StationSearch) -> list[dict[str, Any]]:
        body = {
            "apikey": self.api_key,
            "apiversion": "3",
            "action": "search",
            "type": "near",
            "lat": search.lat,
            "long": search.lng,
            "distance": str(int(search.radius_km * METERS_PER_KM)),
            "limit": self.max_results,
        }
        response = requests.post(self.base_url, json=body, timeout=self.timeout_seconds)
        response.raise_for_status()

        payload = response.json()
        stations = payload.get("chargerstations") or []
        if not isinstance(stations, list):
            raise ValueError("NOBIL response has no chargerstations list")
        return stations

    def normalize(self, raw: dict[str, Any]) -> ChargingStation:
        csmd = raw["csmd"]
        lat, lng = _parse_position(csmd.get("Position"))

        connectors: list[ChargingConnector] = []
        for attr in (raw.get("attr") or {}).values():
            if not isinstance(attr, dict) or str(attr.get("attrtypeid")) != CONNECTOR_ATTR_TYPE_ID:
                continue
            connectors.append(
                ChargingConnector(
                    type=str(attr.get("trans") or attr.get("attrval") or "Unknown"),
                    power_kw=_parse_power_kw(attr.get("attrval")),
                    quantity=1,
                )
            )
        is_fast_charge, max_power_kw = summarize_connectors(connectors)

        return ChargingStation(
            id=self.station_id(csmd["id"]),
            source=self.provider_id,
            name=csmd.get("name"),
            operator=csmd.get("Owned_by") or None,
            lat=lat,
            lng=lng,
            address=join_address(csmd.get("Street"), csmd.get("City"), csmd.get("Zipcode")) or None,
            country_code=csmd.get("Country_code") or None,
            connectors=tuple(connectors),
            is_fast_charge=is_fast_charge,
            max_power_kw=max_power_kw,
            status=None,
        )
