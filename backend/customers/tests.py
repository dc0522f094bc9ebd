from unittest import mock

from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from accounts.models import User
from common.regions import CAMPUS_SUTOMO
from common.testing import make_driver, make_menu_item, make_order, make_store, make_user
from orders.models import Order

PICKUP_LINK = 'https://maps.google.com/?q=3.5614,98.6577'
DROPOFF_LINK = 'https://maps.google.com/?q=3.5700,98.6600'


@override_settings(ROUTING_ENABLED=False)
class CustomerOrderApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.customer = make_user('cust1')
		self.client.force_authenticate(self.customer)

	def _create_ride(self, **overrides):
		body = {
			'order_type': Order.RIDE,
			'pickup_address': 'Gerbang kampus',
			'pickup_map_link': PICKUP_LINK,
			'pickup_region': CAMPUS_SUTOMO,
			'dropoff_address': 'Asrama putra',
			'dropoff_map_link': DROPOFF_LINK,
		}
		body.update(overrides)
		return self.client.post('/api/customer/orders/', body, format='json')

	def test_create_ride(self):
		response = self._create_ride()

		self.assertEqual(response.status_code, 201)
		self.assertTrue(response.data['success'])
		order = response.data['data']['order']
		self.assertEqual(order['status'], Order.SEARCHING_DRIVER)
		self.assertEqual(order['relevant_region'], CAMPUS_SUTOMO)
		self.assertIsNotNone(order['estimated_fare'])
		self.assertEqual(response.data['data']['estimate']['source'], 'haversine')

	def test_second_active_order_conflicts(self):
		self._create_ride()
		response = self._create_ride()

		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.data['error'], 'state_conflict')

	def test_invalid_payload(self):
		response = self._create_ride(order_type='PARCEL')

		self.assertEqual(response.status_code, 400)
		self.assertIn('order_type', response.data['errors'])

	def test_missing_region(self):
		response = self._create_ride(pickup_region='')
		self.assertEqual(response.status_code, 400)

	def test_registered_store_order(self):
		store = make_store('store1')
		item = make_menu_item(store, promo_price=12000)

		response = self.client.post('/api/customer/orders/', {
			'order_type': Order.FOOD_REGISTERED_STORE,
			'store_id': store.id,
			'menu_item_id': item.id,
			'quantity': 2,
			'dropoff_address': 'Asrama putra',
		}, format='json')

		self.assertEqual(response.status_code, 201)
		order = response.data['data']['order']
		self.assertEqual(order['status'], Order.WAITING_STORE_CONFIRM)
		self.assertEqual(order['store_name'], 'store1 kitchen')
		self.assertEqual(order['menu_item']['id'], item.id)
		self.assertEqual(order['menu_item']['effective_price'], 12000)

	def test_active_order_polling(self):
		response = self.client.get('/api/customer/orders/active/')
		self.assertFalse(response.data['data']['has_active_order'])

		self._create_ride()
		response = self.client.get('/api/customer/orders/active/')
		self.assertTrue(response.data['data']['has_active_order'])

	def test_list_and_detail(self):
		order = make_order(self.customer, Order.RIDE, status=Order.COMPLETED)
		other = make_order(make_user('cust2'), Order.RIDE)

		response = self.client.get('/api/customer/orders/')
		self.assertEqual([item['id'] for item in response.data['data']['orders']], [order.id])

		self.assertEqual(self.client.get(f'/api/customer/orders/{order.id}/').status_code, 200)
		self.assertEqual(self.client.get(f'/api/customer/orders/{other.id}/').status_code, 404)

	def test_cancel(self):
		order = make_order(self.customer, Order.RIDE)

		response = self.client.post(f'/api/customer/orders/{order.id}/cancel/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['order']['status'], Order.CANCELLED)

	def test_cancel_after_assignment_conflicts(self):
		order = make_order(self.customer, Order.RIDE, status=Order.DRIVER_ASSIGNED, driver=make_driver('d1'))

		response = self.client.post(f'/api/customer/orders/{order.id}/cancel/')

		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.data['status'], Order.DRIVER_ASSIGNED)

	def test_estimate(self):
		response = self.client.post('/api/customer/orders/estimate/', {
			'pickup_map_link': PICKUP_LINK,
			'dropoff_map_link': DROPOFF_LINK,
		}, format='json')

		self.assertEqual(response.status_code, 200)
		data = response.data['data']
		self.assertEqual(data['pickup'], {'lat': 3.5614, 'lng': 98.6577})
		self.assertEqual(data['source'], 'haversine')
		self.assertGreater(data['distance_km'], 0)

	@mock.patch('customers.views.resolve_coordinates', return_value=None)
	def test_estimate_with_unreadable_links_is_flat(self, mock_resolve):
		response = self.client.post('/api/customer/orders/estimate/', {
			'pickup_map_link': 'https://maps.app.goo.gl/a',
			'dropoff_map_link': 'https://maps.app.goo.gl/b',
		}, format='json')

		self.assertEqual(response.status_code, 200)
		self.assertIsNone(response.data['data']['distance_km'])
		self.assertEqual(response.data['data']['source'], 'flat')

	def test_other_roles_are_refused(self):
		self.client.force_authenticate(make_user('driver1', role=User.DRIVER))
		response = self.client.get('/api/customer/orders/')
		self.assertEqual(response.status_code, 403)


class CustomerRatingApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.customer = make_user('cust1')
		self.client.force_authenticate(self.customer)
		self.order = make_order(self.customer, Order.RIDE, status=Order.COMPLETED, driver=make_driver('d1'))

	def test_rate_completed_order(self):
		response = self.client.post(f'/api/customer/orders/{self.order.id}/rating/', {'driver_rating': 5}, format='json')

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['data']['rating']['driver_rating'], 5)

		response = self.client.get(f'/api/customer/orders/{self.order.id}/rating/')
		self.assertEqual(response.data['data']['rating']['driver_rating'], 5)

	def test_second_rating_conflicts(self):
		self.client.post(f'/api/customer/orders/{self.order.id}/rating/', {'driver_rating': 5}, format='json')
		response = self.client.post(f'/api/customer/orders/{self.order.id}/rating/', {'driver_rating': 1}, format='json')
		self.assertEqual(response.status_code, 409)

	def test_invalid_score(self):
		response = self.client.post(f'/api/customer/orders/{self.order.id}/rating/', {'driver_rating': 6}, format='json')
		self.assertEqual(response.status_code, 400)

	def test_unrated_order(self):
		response = self.client.get(f'/api/customer/orders/{self.order.id}/rating/')
		self.assertEqual(response.status_code, 200)
		self.assertIsNone(response.data['data']['rating'])
