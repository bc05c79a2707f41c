from typing import Any

import requests

from charging.domain.types import ChargingConnector, ChargingStation, StationSearch
from charging.services.providers.base import StationSource, join_address, summarize_connectors


class OpenChargeMapSource(StationSource):
    provider_id = "ocm"

    def fetch(self, search: StationSearch) -> list[dict[str, Any]]:
        params = {
            "key": self.api_key,
            "latitude": search.lat,
            "longitude": search.lng,
            "distance": search.radius_km,
            "distanceunit": "KM",
            "maxresults": self.max_results,
            "compact": "true",
            "verbose": "false",
            "output": "json",
        }
        if search.min_power_kw:
            params["minpowerkw"] = search.min_power_kw

        response = requests.get(self.base_url, params=params, timeout=self.timeout_seconds)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError("Open Charge Map response is not a list of POIs")
        return payload

    def normalize(self, raw: dict[str, Any]) -> ChargingStation:
        address_info = raw["AddressInfo"]
        connectors = [
            ChargingConnector(
                type=str((connection.get("ConnectionType") or {}).get("Title") or "Unknown"),
                power_kw=float(connection["PowerKW"]) if connection.get("PowerKW") is not None else None,
                quantity=int(connection.get("Quantity") or 1),
            )
            for connection in raw.get("Connections") or []
        ]
        is_fast_charge, max_power_kw = summarize_connectors(connectors)

        return ChargingStation(
            id=self.station_id(raw["ID"]),
            source=self.provider_id,
            name=address_info.get("Title"),
            operator=(raw.get("OperatorInfo") or {}).get("Title"),
            lat=float(address_info["Latitude"]),
            lng=float(address_info["Longitude"]),
            address=join_address(
                address_info.get("AddressLine1"),
                address_info.get("Town"),
                address_info.get("Postcode"),
            )
            or None,
            country_code=(address_info.get("Country") or {}).get("ISOCode"),
            connectors=tuple(connectors),
            is_fast_charge=is_fast_charge,
            max_power_kw=max_power_kw,
            status=(raw.get("StatusType") or {}).get("Title"),
        )
