from dataclasses import dataclass, field


@dataclass(frozen=True)
class VehicleProfile:
    battery_capacity_kwh: float
    range_km: float
    connector_type: str | None = None

    @property
    def km_per_percent(self) -> float:
        return self.range_km / 100.0


@dataclass(frozen=True)
class RoutePoint:
    lat: float
    lng: float
    distance_from_start_km: float


@dataclass(frozen=True)
class ChargingConnector:
    type: str
    power_kw: float | None
    quantity: int = 1


@dataclass(frozen=True)
class ChargingStation:
    id: str
    source: str
    name: str | None
    operator: str | None
    lat: float
    lng: float
    address: str | None
    country_code: str | None
    connectors: tuple[ChargingConnector, ...] = field(default_factory=tuple)
    is_fast_charge: bool = False
    max_power_kw: float | None = None
    status: str | None = None


@dataclass(frozen=True)
class ChargingStop:
    station: ChargingStation
    distance_from_start_km: float
    estimated_battery_on_arrival: float


@dataclass(frozen=True)
class StationSearch:
    lat: float
    lng: float
    radius_km: float = 25.0
    min_power_kw: float | None = None
    connector_type: str | None = None


@dataclass(frozen=True)
class PlannerPolicy:
    min_battery_percent: float = 15.0
    charge_to_percent: float = 80.0
    insertion_fraction: float = 0.6
    corridor_km: float = 20.0
