from unittest import mock

import requests
from django.test import SimpleTestCase, TestCase, override_settings

from common.utils import Coordinates, haversine_km
from orders.models import DeliveryPricing
from services.exceptions import UpstreamDegradedError
from services.pricing import estimate_fare, fare_for_distance, flat_fare
from services.pricing.fare import round_distance
from services.pricing.routing import road_distance_km

CAMPUS = Coordinates(3.5614, 98.6577)
DORM = Coordinates(3.5700, 98.6600)


class FareTableTests(SimpleTestCase):
	def setUp(self):
		self.pricing = DeliveryPricing(
			under_1km=5000,
			km_1_to_1_5=6000,
			km_1_5_to_2=7000,
			km_2_to_2_5=8000,
			km_2_5_to_3=9000,
			above_3_per_km=2000,
		)

	def test_band_boundaries_are_half_open(self):
		self.assertEqual(fare_for_distance(0.99, self.pricing), 5000)
		self.assertEqual(fare_for_distance(1.00, self.pricing), 6000)
		self.assertEqual(fare_for_distance(1.49, self.pricing), 6000)
		self.assertEqual(fare_for_distance(1.50, self.pricing), 7000)
		self.assertEqual(fare_for_distance(2.00, self.pricing), 8000)
		self.assertEqual(fare_for_distance(2.50, self.pricing), 9000)
		self.assertEqual(fare_for_distance(2.99, self.pricing), 9000)

	def test_per_km_beyond_three(self):
		self.assertEqual(fare_for_distance(3.00, self.pricing), 9000)
		self.assertEqual(fare_for_distance(3.25, self.pricing), 9500)
		self.assertEqual(fare_for_distance(4.50, self.pricing), 12000)

	def test_distance_rounded_before_banding(self):
		# 0.996 rounds to 1.00 and lands in the second band
		self.assertEqual(fare_for_distance(0.996, self.pricing), 6000)
		self.assertEqual(round_distance(1.005), 1.01)

	def test_fare_never_decreases_with_distance(self):
		previous = 0
		for hundredths in range(0, 1000):
			fare = fare_for_distance(hundredths / 100, self.pricing)
			self.assertGreaterEqual(fare, previous)
			previous = fare

	def test_default_formula_without_pricing(self):
		self.assertEqual(fare_for_distance(0, None), 4000)
		self.assertEqual(fare_for_distance(1.25, None), 6500)
		self.assertEqual(fare_for_distance(0.125, None), 4260)

	def test_flat_fare(self):
		self.assertEqual(flat_fare(self.pricing), 5000)
		self.assertEqual(flat_fare(None), 4000)


class RoutingTests(SimpleTestCase):
	def test_reads_first_route_distance(self):
		session = mock.Mock()
		session.get.return_value.json.return_value = {'code': 'Ok', 'routes': [{'distance': 2345.0}, {'distance': 10}]}

		self.assertAlmostEqual(road_distance_km(CAMPUS, DORM, session=session), 2.345)
		url = session.get.call_args[0][0]
		self.assertIn('/route/v1/driving/98.6577,3.5614;98.66,3.57', url)

	def test_no_route_is_degraded(self):
		session = mock.Mock()
		session.get.return_value.json.return_value = {'code': 'NoRoute', 'routes': []}
		with self.assertRaises(UpstreamDegradedError):
			road_distance_km(CAMPUS, DORM, session=session)

	def test_timeout_is_degraded(self):
		session = mock.Mock()
		session.get.side_effect = requests.Timeout('slow')
		with self.assertRaises(UpstreamDegradedError):
			road_distance_km(CAMPUS, DORM, session=session)

	@override_settings(ROUTING_ENABLED=False)
	def test_disabled_routing_is_degraded(self):
		session = mock.Mock()
		with self.assertRaises(UpstreamDegradedError):
			road_distance_km(CAMPUS, DORM, session=session)
		session.get.assert_not_called()


class EstimatorTests(TestCase):
	@mock.patch('services.pricing.estimator.road_distance_km', return_value=1.234)
	def test_uses_road_distance_when_available(self, mock_route):
		estimate = estimate_fare(CAMPUS, DORM)

		self.assertEqual(estimate.distance_km, 1.23)
		self.assertEqual(estimate.source, 'routing')
		# no pricing record: default formula
		self.assertEqual(estimate.fare, 6460)

	@mock.patch('services.pricing.estimator.road_distance_km', side_effect=UpstreamDegradedError('down'))
	def test_falls_back_to_haversine_with_detour(self, mock_route):
		DeliveryPricing.objects.create()

		estimate = estimate_fare(CAMPUS, DORM)

		expected = round_distance(haversine_km(CAMPUS, DORM) * 1.3)
		self.assertEqual(estimate.distance_km, expected)
		self.assertEqual(estimate.source, 'haversine')
		self.assertEqual(estimate.fare, fare_for_distance(expected, DeliveryPricing.current()))

	def test_missing_coordinates_give_flat_fare(self):
		DeliveryPricing.objects.create(under_1km=5500)

		estimate = estimate_fare(CAMPUS, None)

		self.assertIsNone(estimate.distance_km)
		self.assertEqual(estimate.fare, 5500)
		self.assertEqual(estimate.source, 'flat')

	def test_most_recent_pricing_wins(self):
		DeliveryPricing.objects.create(under_1km=5000)
		latest = DeliveryPricing.objects.create(under_1km=7000)
		self.assertEqual(DeliveryPricing.current(), latest)
