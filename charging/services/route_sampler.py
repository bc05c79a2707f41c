from charging.domain.distance import cumulative_route_distances_km
from charging.domain.types import RoutePoint


def sample_route_points(route_geometry: list[list[float]], spacing_km: float) -> list[RoutePoint]:
    """Thin a GeoJSON ``[lon, lat]`` geometry into route points roughly ``spacing_km`` apart.

    The first and last geometry points are always kept.
    """
    if not route_geometry:
        return []

    cumulative = cumulative_route_distances_km(route_geometry)
    keep = [0]
    for idx in range(1, len(route_geometry)):
        if cumulative[idx] - cumulative[keep[-1]] >= spacing_km:
            keep.append(idx)
    if keep[-1] != len(route_geometry) - 1:
        keep.append(len(route_geometry) - 1)

    return [
        RoutePoint(
            lat=float(route_geometry[idx][1]),
            lng=float(route_geometry[idx][0]),
            distance_from_start_km=cumulative[idx],
        )
        for idx in keep
    ]
