from django.test import SimpleTestCase

from charging.domain.merge import merge_station_batches, merge_station_lists
from charging.domain.types import ChargingStation


def _station(station_id: str, lat: float, lng: float, source: str = "ocm") -> ChargingStation:
    return ChargingStation(
        id=station_id,
        source=source,
        name=station_id,
        operator=None,
        lat=lat,
        lng=lng,
        address=None,
        country_code=None,
    )


class StationMergeTests(SimpleTestCase):
    def test_exact_duplicates_collapse_to_primary_set(self):
        primary = [_station(f"ocm-{idx}", 59.0 + idx, 10.0 + idx) for idx in range(5)]
        secondary = [_station(f"nobil-{idx}", 59.0 + idx, 10.0 + idx, source="nobil") for idx in range(5)]

        merged = merge_station_lists(primary, secondary)

        self.assertEqual(merged, primary)

    def test_boundary_offset_is_treated_as_distinct(self):
        primary = [_station("ocm-1", 0.0, 0.0)]
        secondary = [_station("nobil-1", 0.0005, 0.0005, source="nobil")]

        merged = merge_station_lists(primary, secondary)

        self.assertEqual([station.id for station in merged], ["ocm-1", "nobil-1"])

    def test_close_stations_are_duplicates(self):
        primary = [_station("ocm-1", 10.0, 20.0)]
        secondary = [_station("nobil-1", 10.0001, 20.0001, source="nobil")]

        merged = merge_station_lists(primary, secondary)

        self.assertEqual([station.id for station in merged], ["ocm-1"])

    def test_only_one_axis_close_is_not_a_duplicate(self):
        primary = [_station("ocm-1", 10.0, 20.0)]
        secondary = [_station("nobil-1", 10.0001, 20.01, source="nobil")]

        merged = merge_station_lists(primary, secondary)

        self.assertEqual(len(merged), 2)

    def test_primary_first_then_secondary_in_original_order(self):
        primary = [_station("ocm-b", 1.0, 1.0), _station("ocm-a", 2.0, 2.0)]
        secondary = [
            _station("nobil-z", 3.0, 3.0, source="nobil"),
            _station("nobil-dup", 2.0, 2.0, source="nobil"),
            _station("nobil-y", 4.0, 4.0, source="nobil"),
        ]

        merged = merge_station_lists(primary, secondary)

        self.assertEqual([station.id for station in merged], ["ocm-b", "ocm-a", "nobil-z", "nobil-y"])

    def test_primary_batch_is_never_deduplicated_against_itself(self):
        primary = [_station("ocm-1", 5.0, 5.0), _station("ocm-2", 5.0, 5.0)]
        secondary = [_station("nobil-1", 5.0, 5.0, source="nobil")]

        merged = merge_station_batches([primary, secondary])

        self.assertEqual([station.id for station in merged], ["ocm-1", "ocm-2"])

    def test_no_batches_merge_to_empty_list(self):
        self.assertEqual(merge_station_batches([]), [])
