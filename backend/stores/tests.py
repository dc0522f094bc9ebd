from django.test import TestCase
from rest_framework.test import APIClient

from common.regions import CAMPUS_TUNTUNGAN
from common.testing import make_order, make_store, make_user
from orders.models import Order
from stores.models import StoreAvailability


class StoreApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.store = make_store('store1', tickets=1)
		self.client.force_authenticate(self.store)

	def _order(self, status=Order.WAITING_STORE_CONFIRM, customer=None):
		return make_order(customer or make_user(f'cust{Order.objects.count()}'), Order.FOOD_REGISTERED_STORE, status=status, store=self.store)

	def test_availability_defaults_for_new_store(self):
		fresh = make_user('store2', role='STORE')
		self.client.force_authenticate(fresh)

		response = self.client.get('/api/store/availability/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['availability']['store_name'], 'store2')
		self.assertEqual(response.data['data']['availability']['status'], StoreAvailability.INACTIVE)

	def test_availability_update_geocodes_location(self):
		response = self.client.patch('/api/store/availability/', {
			'region': CAMPUS_TUNTUNGAN,
			'location_url': 'https://maps.google.com/?q=3.52,98.61',
		}, format='json')

		self.assertEqual(response.status_code, 200)
		availability = StoreAvailability.objects.get(user=self.store)
		self.assertEqual(availability.region, CAMPUS_TUNTUNGAN)
		self.assertEqual(float(availability.longitude), 98.61)

	def test_accept_ready_flow(self):
		order = self._order()

		response = self.client.post(f'/api/store/orders/{order.id}/accept/')
		self.assertEqual(response.data['data']['order']['status'], Order.CONFIRMED_COOKING)

		response = self.client.post(f'/api/store/orders/{order.id}/ready/')
		self.assertEqual(response.data['data']['order']['status'], Order.SEARCHING_DRIVER)

	def test_accept_without_tickets(self):
		broke = make_store('store3')
		order = make_order(make_user('custx'), Order.FOOD_REGISTERED_STORE, store=broke)
		self.client.force_authenticate(broke)

		response = self.client.post(f'/api/store/orders/{order.id}/accept/')

		self.assertEqual(response.status_code, 402)

	def test_reject_with_reason(self):
		order = self._order()

		response = self.client.post(f'/api/store/orders/{order.id}/reject/', {'reason': 'Sold out'}, format='json')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['order']['rejection_reason'], 'Sold out')

	def test_ready_before_accept_conflicts(self):
		order = self._order()
		response = self.client.post(f'/api/store/orders/{order.id}/ready/')
		self.assertEqual(response.status_code, 409)

	def test_order_lists_are_paged(self):
		for _ in range(3):
			self._order()
		self._order(status=Order.COMPLETED)

		response = self.client.get('/api/store/orders/', {'page': 1, 'per_page': 2})
		data = response.data['data']
		self.assertEqual(len(data['orders']), 2)
		self.assertEqual(data['total'], 3)

		response = self.client.get('/api/store/orders/history/')
		self.assertEqual(response.data['data']['total'], 4)

	def test_bad_page_params(self):
		response = self.client.get('/api/store/orders/', {'per_page': 500})
		self.assertEqual(response.status_code, 400)
