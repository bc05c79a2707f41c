from unittest.mock import patch

from django.test import SimpleTestCase, override_settings

from charging.domain.types import ChargingConnector, ChargingStation, RoutePoint, VehicleProfile
from charging.services.routing import RouteResult
from charging.services.trip_planner import build_trip_charging_plan, plan_route_charging

# 0.9 degrees of longitude on the equator is roughly 100 km.
ROUTE_POINTS = [
    RoutePoint(lat=0.0, lng=0.0, distance_from_start_km=0.0),
    RoutePoint(lat=0.0, lng=0.9, distance_from_start_km=100.0),
    RoutePoint(lat=0.0, lng=1.8, distance_from_start_km=200.0),
    RoutePoint(lat=0.0, lng=2.7, distance_from_start_km=300.0),
]
STATION = ChargingStation(
    id="ocm-7",
    source="ocm",
    name="Equator Fast Charge",
    operator="Acme",
    lat=0.0,
    lng=1.8,
    address="Somewhere 1",
    country_code="XX",
    connectors=(ChargingConnector(type="CCS", power_kw=150.0, quantity=2),),
    is_fast_charge=True,
    max_power_kw=150.0,
    status="Operational",
)
VEHICLE = VehicleProfile(battery_capacity_kwh=40.0, range_km=250.0, connector_type="CCS")


class PlanRouteChargingTests(SimpleTestCase):
    @patch("charging.services.trip_planner.fetch_corridor_stations")
    def test_uses_supplied_stations_without_searching(self, mock_fetch):
        result = plan_route_charging(ROUTE_POINTS, VEHICLE, stations=[STATION])

        mock_fetch.assert_not_called()
        self.assertEqual(len(result["stops"]), 1)
        stop = result["stops"][0]
        self.assertEqual(stop["sequence"], 1)
        self.assertEqual(stop["distance_from_start_km"], 200.0)
        self.assertEqual(stop["estimated_battery_on_arrival"], 20.0)
        self.assertEqual(stop["station"]["id"], "ocm-7")
        self.assertEqual(stop["station"]["location"], {"lat": 0.0, "lng": 1.8})
        self.assertEqual(stop["station"]["connectors"], [{"type": "CCS", "power_kw": 150.0, "quantity": 2}])
        self.assertTrue(result["meta"]["stations_supplied_by_caller"])
        self.assertEqual(result["meta"]["route_distance_km"], 300.0)

    @patch("charging.services.trip_planner.fetch_corridor_stations")
    def test_fetches_corridor_stations_with_vehicle_connector(self, mock_fetch):
        mock_fetch.return_value = [STATION]

        result = plan_route_charging(ROUTE_POINTS, VEHICLE, min_power_kw=50)

        mock_fetch.assert_called_once_with(ROUTE_POINTS, min_power_kw=50, connector_type="CCS")
        self.assertEqual(result["meta"]["candidate_stations_considered"], 1)
        self.assertFalse(result["meta"]["stations_supplied_by_caller"])

    @override_settings(CHARGING_MIN_BATTERY_PERCENT=5.0)
    def test_policy_is_read_from_settings(self):
        result = plan_route_charging(ROUTE_POINTS, VEHICLE, stations=[STATION])

        self.assertEqual(result["meta"]["policy"]["min_battery_percent"], 5.0)
        # 300 km on a 250 km range still falls short of a 5% floor.
        self.assertEqual(len(result["stops"]), 1)


class BuildTripChargingPlanTests(SimpleTestCase):
    @override_settings(ROUTE_SAMPLE_SPACING_KM=50.0)
    @patch("charging.services.trip_planner.fetch_corridor_stations")
    @patch("charging.services.trip_planner.fetch_route")
    def test_routes_samples_and_plans(self, mock_fetch_route, mock_fetch_stations):
        mock_fetch_route.return_value = RouteResult(
            distance_km=300.2,
            duration_minutes=200.0,
            geometry=[[point.lng, point.lat] for point in ROUTE_POINTS],
            provider="osrm",
        )
        mock_fetch_stations.return_value = [STATION]

        result = build_trip_charging_plan(0.0, 0.0, 0.0, 2.7, vehicle=VEHICLE, start_battery_percent=90)

        mock_fetch_route.assert_called_once_with(start_lat=0.0, start_lng=0.0, end_lat=0.0, end_lng=2.7)
        sampled_points = mock_fetch_stations.call_args.args[0]
        self.assertEqual(len(sampled_points), 4)
        self.assertEqual(result["route"]["provider"], "osrm")
        self.assertEqual(result["route"]["geometry"]["type"], "LineString")
        self.assertEqual(result["destination"], {"lat": 0.0, "lng": 2.7})
        self.assertEqual(result["start_battery_percent"], 90)
        self.assertEqual([stop["station"]["id"] for stop in result["stops"]], ["ocm-7"])
