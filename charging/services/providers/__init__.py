from charging.services.providers.base import SourceResult, StationSource
from charging.services.providers.nobil import NobilSource
from charging.services.providers.ocm import OpenChargeMapSource

__all__ = [
    "NobilSource",
    "OpenChargeMapSource",
    "SourceResult",
    "StationSource",
]
