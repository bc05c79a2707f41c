from charging.domain.types import ChargingStation

DEDUP_TOLERANCE_DEGREES = 0.0005


def is_same_site(
    first: ChargingStation,
    second: ChargingStation,
    tolerance_degrees: float = DEDUP_TOLERANCE_DEGREES,
) -> bool:
    # Axis-aligned box check, roughly 50 m at mid-latitudes.
    return abs(first.lat - second.lat) < tolerance_degrees and abs(first.lng - second.lng) < tolerance_degrees


def merge_station_lists(
    primary: list[ChargingStation],
    secondary: list[ChargingStation],
    tolerance_degrees: float = DEDUP_TOLERANCE_DEGREES,
) -> list[ChargingStation]:
    """Append secondary stations that do not sit on top of an already accepted one.

    Primary stations are kept untouched and in order; a secondary station is
    also compared against secondary stations accepted before it.
    """
    merged: list[ChargingStation] = list(primary)
    for candidate in secondary:
        duplicate = any(
            is_same_site(existing, candidate, tolerance_degrees=tolerance_degrees) for existing in merged
        )
        if not duplicate:
            merged.append(candidate)
    return merged


def merge_station_batches(
    batches: list[list[ChargingStation]],
    tolerance_degrees: float = DEDUP_TOLERANCE_DEGREES,
) -> list[ChargingStation]:
    if not batches:
        return []

    merged = list(batches[0])
    for batch in batches[1:]:
        merged = merge_station_lists(merged, batch, tolerance_degrees=tolerance_degrees)
    return merged
