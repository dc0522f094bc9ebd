from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from accounts.models import User
from common.testing import make_driver, make_order, make_user
from orders.models import DeliveryPricing, Order
from orders.state_machine import CUSTOMER_CANCELLABLE, TRANSITIONS, can_transition, initial_status
from services.exceptions import OrderValidationError


class StateMachineTests(SimpleTestCase):
	def test_initial_status_per_type(self):
		self.assertEqual(initial_status(Order.FOOD_REGISTERED_STORE), Order.WAITING_STORE_CONFIRM)
		self.assertEqual(initial_status(Order.FOOD_EXTERNAL_STORE), Order.SEARCHING_DRIVER)
		self.assertEqual(initial_status(Order.RIDE), Order.SEARCHING_DRIVER)
		with self.assertRaises(OrderValidationError):
			initial_status('PARCEL')

	def test_terminal_statuses_have_no_exits(self):
		for order_type, table in TRANSITIONS.items():
			for terminal in Order.TERMINAL_STATUSES:
				self.assertEqual(table.get(terminal, set()), set(), (order_type, terminal))

	def test_registered_store_path(self):
		path = [
			Order.WAITING_STORE_CONFIRM, Order.CONFIRMED_COOKING, Order.SEARCHING_DRIVER,
			Order.DRIVER_ASSIGNED, Order.ON_DELIVERY, Order.COMPLETED,
		]
		for current, target in zip(path, path[1:]):
			self.assertTrue(can_transition(Order.FOOD_REGISTERED_STORE, current, target))
		self.assertTrue(can_transition(Order.FOOD_REGISTERED_STORE, Order.WAITING_STORE_CONFIRM, Order.REJECTED))
		self.assertFalse(can_transition(Order.FOOD_REGISTERED_STORE, Order.CONFIRMED_COOKING, Order.CANCELLED))

	def test_registered_store_order_never_cancelled_while_searching(self):
		self.assertFalse(can_transition(Order.FOOD_REGISTERED_STORE, Order.SEARCHING_DRIVER, Order.CANCELLED))

	def test_only_external_orders_cancel_after_assignment(self):
		self.assertTrue(can_transition(Order.FOOD_EXTERNAL_STORE, Order.DRIVER_ASSIGNED, Order.CANCELLED))
		self.assertFalse(can_transition(Order.RIDE, Order.DRIVER_ASSIGNED, Order.CANCELLED))
		self.assertFalse(can_transition(Order.FOOD_EXTERNAL_STORE, Order.ON_DELIVERY, Order.CANCELLED))

	def test_no_skipping(self):
		self.assertFalse(can_transition(Order.RIDE, Order.SEARCHING_DRIVER, Order.ON_DELIVERY))
		self.assertFalse(can_transition(Order.RIDE, Order.DRIVER_ASSIGNED, Order.COMPLETED))

	def test_customer_cancellable_status_is_a_legal_cancel(self):
		for order_type, status in CUSTOMER_CANCELLABLE.items():
			self.assertTrue(can_transition(order_type, status, Order.CANCELLED))


class OrderModelTests(TestCase):
	def test_one_active_order_rule_ignores_terminal_orders(self):
		customer = make_user('cust1')
		make_order(customer, Order.RIDE, status=Order.COMPLETED)
		make_order(customer, Order.RIDE, status=Order.CANCELLED)
		make_order(customer, Order.RIDE)

		self.assertEqual(Order.objects.filter(customer=customer).count(), 3)

	def test_is_party(self):
		customer = make_user('cust1')
		driver = make_driver('d1')
		order = make_order(customer, Order.RIDE, status=Order.DRIVER_ASSIGNED, driver=driver)

		self.assertTrue(order.is_party(customer))
		self.assertTrue(order.is_party(driver))
		self.assertFalse(order.is_party(make_user('other')))


class DeliveryPricingApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.admin = make_user('admin1', role=User.ADMIN)
		self.customer = make_user('cust1')
		self.body = {
			'under_1km': 5000,
			'km_1_to_1_5': 6000,
			'km_1_5_to_2': 7000,
			'km_2_to_2_5': 8000,
			'km_2_5_to_3': 9000,
			'above_3_per_km': 2000,
		}

	def test_get_without_pricing(self):
		self.client.force_authenticate(self.customer)
		response = self.client.get('/api/pricing/')

		self.assertEqual(response.status_code, 200)
		self.assertTrue(response.data['success'])
		self.assertIsNone(response.data['data']['pricing'])

	def test_admin_publishes_new_table(self):
		DeliveryPricing.objects.create()
		self.client.force_authenticate(self.admin)

		response = self.client.put('/api/pricing/', {**self.body, 'under_1km': 5500}, format='json')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(DeliveryPricing.objects.count(), 2)
		self.assertEqual(DeliveryPricing.current().under_1km, 5500)
		self.assertEqual(DeliveryPricing.current().created_by, self.admin)

	def test_non_admin_cannot_publish(self):
		self.client.force_authenticate(self.customer)
		response = self.client.put('/api/pricing/', self.body, format='json')

		self.assertEqual(response.status_code, 403)
		self.assertEqual(response.data['error'], 'unauthorized')

	def test_decreasing_bands_rejected(self):
		self.client.force_authenticate(self.admin)
		response = self.client.put('/api/pricing/', {**self.body, 'km_1_5_to_2': 4000}, format='json')

		self.assertEqual(response.status_code, 400)
		self.assertFalse(DeliveryPricing.objects.exists())

	def test_anonymous_rejected(self):
		response = self.client.get('/api/pricing/')
		self.assertEqual(response.status_code, 401)
		self.assertEqual(response.data['error'], 'unauthenticated')


class ResolveMapLinkApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.client.force_authenticate(make_user('cust1'))

	def test_direct_link(self):
		response = self.client.get('/api/utils/resolve-map/', {'url': 'https://maps.google.com/?q=3.5952,98.6722'})

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data'], {'lat': 3.5952, 'lng': 98.6722})

	def test_missing_url(self):
		response = self.client.get('/api/utils/resolve-map/')
		self.assertEqual(response.status_code, 400)

	def test_unreadable_text(self):
		response = self.client.get('/api/utils/resolve-map/', {'url': 'dekat kantin'})
		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'validation_error')


class OrderProofsApiTests(TestCase):
	def test_non_party_gets_404(self):
		order = make_order(make_user('cust1'), Order.RIDE, pickup_proof_refs=['proofs/pickup/a.png'])
		client = APIClient()

		client.force_authenticate(order.customer)
		response = client.get(f'/api/orders/{order.id}/proofs/')
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['pickup'][0]['ref'], 'proofs/pickup/a.png')
		self.assertEqual(response.data['data']['delivery'], [])

		client.force_authenticate(make_user('stranger'))
		response = client.get(f'/api/orders/{order.id}/proofs/')
		self.assertEqual(response.status_code, 404)
