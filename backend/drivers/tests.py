import shutil
import tempfile

from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from common.regions import CAMPUS_PANCING, CAMPUS_SUTOMO
from common.testing import make_driver, make_image, make_order, make_store, make_user
from drivers.models import DriverAvailability
from orders.models import Order
from services.ledger import get_balance

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(ROUTING_ENABLED=False, MEDIA_ROOT=MEDIA_ROOT)
class DriverApiTests(TestCase):
	@classmethod
	def tearDownClass(cls):
		shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
		super().tearDownClass()

	def setUp(self):
		self.client = APIClient()
		self.driver = make_driver('d1', region=CAMPUS_SUTOMO, tickets=2)
		self.client.force_authenticate(self.driver)
		self.customer = make_user('cust1')

	def test_availability_update(self):
		response = self.client.patch('/api/driver/availability/', {
			'region': CAMPUS_PANCING,
			'status': DriverAvailability.INACTIVE,
			'location_url': 'https://maps.google.com/?q=3.5,98.6',
		}, format='json')

		self.assertEqual(response.status_code, 200)
		availability = DriverAvailability.objects.get(user=self.driver)
		self.assertEqual(availability.region, CAMPUS_PANCING)
		self.assertEqual(availability.status, DriverAvailability.INACTIVE)
		self.assertEqual(float(availability.latitude), 3.5)

	def test_availability_rejects_unknown_region(self):
		response = self.client.patch('/api/driver/availability/', {'region': 'MARS'}, format='json')
		self.assertEqual(response.status_code, 400)

	def test_available_orders_payload(self):
		order = make_order(self.customer, Order.RIDE, pickup_region=CAMPUS_SUTOMO)

		response = self.client.get('/api/driver/orders/available/')

		self.assertEqual(response.status_code, 200)
		data = response.data['data']
		self.assertEqual([item['id'] for item in data['orders']], [order.id])
		self.assertIn('fare', data['orders'][0])
		self.assertFalse(data['has_active'])
		self.assertEqual(data['ticket_balance'], 2)

	def test_available_orders_without_region(self):
		DriverAvailability.objects.filter(user=self.driver).update(region=None)
		response = self.client.get('/api/driver/orders/available/')
		self.assertEqual(response.status_code, 400)

	def test_claim_flow_to_completion(self):
		order = make_order(self.customer, Order.RIDE, pickup_region=CAMPUS_SUTOMO)

		response = self.client.post(f'/api/driver/orders/{order.id}/claim/')
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['order']['status'], Order.DRIVER_ASSIGNED)

		active = self.client.get('/api/driver/orders/active/')
		self.assertEqual(active.data['data']['order']['id'], order.id)

		response = self.client.post(
			f'/api/driver/orders/{order.id}/pickup-proof/',
			{'images': [make_image('a.png')]},
			format='multipart',
		)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['order']['status'], Order.ON_DELIVERY)

		response = self.client.post(
			f'/api/driver/orders/{order.id}/delivery-proof/',
			{'image': make_image('b.png')},
			format='multipart',
		)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['order']['status'], Order.COMPLETED)
		self.assertEqual(get_balance(self.driver), 1)

		history = self.client.get('/api/driver/orders/history/')
		self.assertEqual([item['id'] for item in history.data['data']['orders']], [order.id])

	def test_claim_taken_order_conflicts(self):
		order = make_order(self.customer, Order.RIDE, status=Order.DRIVER_ASSIGNED, driver=make_driver('d2'))

		response = self.client.post(f'/api/driver/orders/{order.id}/claim/')

		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.data['error'], 'state_conflict')

	def test_claim_without_tickets(self):
		broke = make_driver('d3')
		order = make_order(self.customer, Order.RIDE)
		self.client.force_authenticate(broke)

		response = self.client.post(f'/api/driver/orders/{order.id}/claim/')

		self.assertEqual(response.status_code, 402)
		self.assertEqual(response.data['error'], 'quota_exceeded')

	def test_proof_without_image(self):
		order = make_order(self.customer, Order.RIDE, status=Order.DRIVER_ASSIGNED, driver=self.driver)

		response = self.client.post(f'/api/driver/orders/{order.id}/pickup-proof/', {}, format='multipart')

		self.assertEqual(response.status_code, 400)

	def test_cancel_external(self):
		order = make_order(self.customer, Order.FOOD_EXTERNAL_STORE, status=Order.DRIVER_ASSIGNED, driver=self.driver)

		response = self.client.post(f'/api/driver/orders/{order.id}/cancel/', {'reason': 'OTHER'}, format='json')
		self.assertEqual(response.status_code, 400)

		response = self.client.post(
			f'/api/driver/orders/{order.id}/cancel/',
			{'reason': Order.REASON_STORE_NOT_FOUND},
			format='json',
		)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['order']['cancel_reason'], Order.REASON_STORE_NOT_FOUND)

	def test_detail_of_open_and_foreign_orders(self):
		open_order = make_order(self.customer, Order.RIDE)
		store = make_store('store1')
		foreign = make_order(
			make_user('cust2'), Order.FOOD_REGISTERED_STORE, status=Order.DRIVER_ASSIGNED,
			store=store, driver=make_driver('d2'),
		)

		self.assertEqual(self.client.get(f'/api/driver/orders/{open_order.id}/').status_code, 200)
		self.assertEqual(self.client.get(f'/api/driver/orders/{foreign.id}/').status_code, 404)
