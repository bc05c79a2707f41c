from unittest.mock import patch

from django.test import SimpleTestCase
from requests import ConnectionError

from charging.domain.types import ChargingStation, VehicleProfile
from charging.services.routing import RoutingError

STATION = ChargingStation(
    id="nobil-42",
    source="nobil",
    name="Circle K Lillehammer",
    operator="Circle K",
    lat=61.1153,
    lng=10.4663,
    address="Storgata 1, Lillehammer, 2609",
    country_code="NOR",
    is_fast_charge=True,
    max_power_kw=50.0,
)

VEHICLE_PAYLOAD = {"battery_capacity_kwh": 75, "range_km": 400, "connector_type": "CCS"}

TRIP_PLAN_RESULT = {
    "vehicle": VEHICLE_PAYLOAD,
    "start_battery_percent": 100.0,
    "stops": [],
    "meta": {"route_points": 2, "candidate_stations_considered": 0},
    "origin": {"lat": 59.91, "lng": 10.75},
    "destination": {"lat": 63.43, "lng": 10.39},
    "route": {
        "distance_km": 495.0,
        "duration_minutes": 380.0,
        "provider": "osrm",
        "geometry": {"type": "LineString", "coordinates": [[10.75, 59.91], [10.39, 63.43]]},
    },
}


class StationSearchApiTests(SimpleTestCase):
    @patch("charging.api.views.search_charging_stations")
    def test_returns_serialized_merged_stations(self, mock_search):
        mock_search.return_value = [STATION]

        response = self.client.get(
            "/api/charging/stations/",
            data={"lat": "61.1", "lng": "10.4", "min_power_kw": "50", "connector_type": "CCS"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body[0]["id"], "nobil-42")
        self.assertEqual(body[0]["location"], {"lat": 61.1153, "lng": 10.4663})
        search = mock_search.call_args.args[0]
        self.assertEqual(search.radius_km, 25.0)
        self.assertEqual(search.min_power_kw, 50.0)
        self.assertEqual(search.connector_type, "CCS")

    def test_rejects_missing_coordinates(self):
        response = self.client.get("/api/charging/stations/", data={"lat": "61.1"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("lng", response.json())


class ChargingPlanApiTests(SimpleTestCase):
    def test_plans_with_caller_supplied_stations(self):
        response = self.client.post(
            "/api/charging/plan/",
            data={
                "route_points": [
                    {"lat": 0.0, "lng": 0.0, "distance_from_start_km": 0},
                    {"lat": 0.0, "lng": 3.1476, "distance_from_start_km": 350},
                    {"lat": 0.0, "lng": 6.2952, "distance_from_start_km": 700},
                ],
                "vehicle": VEHICLE_PAYLOAD,
                "stations": [
                    {
                        "id": "ocm-1",
                        "source": "ocm",
                        "location": {"lat": 0.0, "lng": 3.15},
                        "connectors": [{"type": "CCS", "power_kw": 150}],
                        "is_fast_charge": True,
                        "max_power_kw": 150,
                    }
                ],
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        stops = response.json()["stops"]
        self.assertEqual(len(stops), 1)
        self.assertEqual(stops[0]["station"]["id"], "ocm-1")
        self.assertEqual(stops[0]["distance_from_start_km"], 350.0)
        self.assertEqual(stops[0]["estimated_battery_on_arrival"], 12.5)

    def test_supplied_station_without_flags_is_ranked_by_its_connectors(self):
        response = self.client.post(
            "/api/charging/plan/",
            data={
                "route_points": [
                    {"lat": 0.0, "lng": 0.0, "distance_from_start_km": 0},
                    {"lat": 0.0, "lng": 3.1476, "distance_from_start_km": 350},
                    {"lat": 0.0, "lng": 6.2952, "distance_from_start_km": 700},
                ],
                "vehicle": VEHICLE_PAYLOAD,
                "stations": [
                    {
                        "id": "ext-slow",
                        "location": {"lat": 0.0, "lng": 3.1476},
                        "connectors": [{"type": "Type 2", "power_kw": 22}],
                    },
                    {
                        "id": "ext-fast",
                        "location": {"lat": 0.0, "lng": 3.16},
                        "connectors": [{"type": "CCS", "power_kw": 150}],
                    },
                ],
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        station = response.json()["stops"][0]["station"]
        self.assertEqual(station["id"], "ext-fast")
        self.assertTrue(station["is_fast_charge"])
        self.assertEqual(station["max_power_kw"], 150.0)

    def test_unordered_route_is_a_bad_request(self):
        response = self.client.post(
            "/api/charging/plan/",
            data={
                "route_points": [
                    {"lat": 0.0, "lng": 0.0, "distance_from_start_km": 100},
                    {"lat": 0.0, "lng": 1.0, "distance_from_start_km": 50},
                ],
                "vehicle": VEHICLE_PAYLOAD,
                "stations": [],
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("not ordered", response.json()["detail"])

    def test_validates_vehicle(self):
        response = self.client.post(
            "/api/charging/plan/",
            data={"route_points": [], "vehicle": {"battery_capacity_kwh": 75}},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("vehicle", response.json())


class TripPlanApiTests(SimpleTestCase):
    @patch("charging.api.views.build_trip_charging_plan")
    def test_trip_plan_endpoint_returns_service_payload(self, mock_build):
        mock_build.return_value = TRIP_PLAN_RESULT

        response = self.client.post(
            "/api/trip-plan/",
            data={
                "origin": {"lat": 59.91, "lng": 10.75},
                "destination": {"lat": 63.43, "lng": 10.39},
                "vehicle": VEHICLE_PAYLOAD,
                "start_battery_percent": 90,
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["route"]["provider"], "osrm")
        mock_build.assert_called_once_with(
            origin_lat=59.91,
            origin_lng=10.75,
            destination_lat=63.43,
            destination_lng=10.39,
            vehicle=VehicleProfile(battery_capacity_kwh=75.0, range_km=400.0, connector_type="CCS"),
            start_battery_percent=90.0,
            min_power_kw=None,
        )

    def test_trip_plan_endpoint_validates_payload(self):
        response = self.client.post(
            "/api/trip-plan/",
            data={"origin": {"lat": 59.91, "lng": 10.75}},
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("destination", response.json())

    @patch("charging.api.views.build_trip_charging_plan")
    def test_routing_failure_is_a_bad_request(self, mock_build):
        mock_build.side_effect = RoutingError("OSRM directions failed: NoRoute")

        response = self.client.post(
            "/api/trip-plan/",
            data={
                "origin": {"lat": 59.91, "lng": 10.75},
                "destination": {"lat": 40.71, "lng": -74.0},
                "vehicle": VEHICLE_PAYLOAD,
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("NoRoute", response.json()["detail"])

    @patch("charging.api.views.build_trip_charging_plan")
    def test_network_failure_is_a_bad_gateway(self, mock_build):
        mock_build.side_effect = ConnectionError("connection refused")

        response = self.client.post(
            "/api/trip-plan/",
            data={
                "origin": {"lat": 59.91, "lng": 10.75},
                "destination": {"lat": 63.43, "lng": 10.39},
                "vehicle": VEHICLE_PAYLOAD,
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 502)
