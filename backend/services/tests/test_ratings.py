from unittest import mock

from django.db import IntegrityError
from django.test import TestCase

from common.testing import make_driver, make_order, make_store, make_user
from orders.models import Order, OrderRating
from services.exceptions import NotFoundError, OrderValidationError, StateConflictError
from services.order_management import get_order_rating, rate_order


class RateOrderTests(TestCase):
	def setUp(self):
		self.customer = make_user('cust1')
		self.driver = make_driver('d1')
		self.store = make_store('store1')
		self.food = make_order(
			self.customer, Order.FOOD_REGISTERED_STORE, status=Order.COMPLETED,
			driver=self.driver, store=self.store,
		)

	def test_rates_driver_and_store(self):
		with mock.patch('services.order_management.ratings.notify_orders_changed') as notify:
			rating = rate_order(self.customer, self.food.id, 5, 4)

		self.assertEqual(rating.driver, self.driver)
		self.assertEqual(rating.store, self.store)
		self.assertEqual((rating.driver_rating, rating.store_rating), (5, 4))
		notify.assert_called_once()
		self.food.refresh_from_db()
		self.assertEqual(self.food.status, Order.COMPLETED)

	def test_store_rating_is_optional(self):
		rating = rate_order(self.customer, self.food.id, 3)
		self.assertIsNone(rating.store_rating)

	def test_store_rating_dropped_for_ride(self):
		ride = make_order(make_user('cust2'), Order.RIDE, status=Order.COMPLETED, driver=self.driver)

		rating = rate_order(ride.customer, ride.id, 4, 5)

		self.assertIsNone(rating.store)
		self.assertIsNone(rating.store_rating)

	def test_only_once_per_order(self):
		rate_order(self.customer, self.food.id, 5)

		with self.assertRaises(StateConflictError):
			rate_order(self.customer, self.food.id, 1)
		self.assertEqual(OrderRating.objects.get(order=self.food).driver_rating, 5)

	def test_concurrent_duplicate_maps_to_conflict(self):
		with mock.patch.object(OrderRating.objects, 'create', side_effect=IntegrityError('unique')):
			with self.assertRaises(StateConflictError):
				rate_order(self.customer, self.food.id, 5)

	def test_order_must_be_completed(self):
		active = make_order(make_user('cust2'), Order.RIDE, status=Order.ON_DELIVERY, driver=make_driver('d2'))

		with self.assertRaises(StateConflictError):
			rate_order(active.customer, active.id, 5)
		self.assertFalse(OrderRating.objects.exists())

	def test_scores_outside_range(self):
		for driver_rating, store_rating in ((0, None), (6, None), ('abc', None), (None, None), (5, 9)):
			with self.assertRaises(OrderValidationError):
				rate_order(self.customer, self.food.id, driver_rating, store_rating)
		self.assertFalse(OrderRating.objects.exists())

	def test_other_customer_sees_not_found(self):
		with self.assertRaises(NotFoundError):
			rate_order(make_user('cust2'), self.food.id, 5)
		with self.assertRaises(NotFoundError):
			get_order_rating(make_user('cust3'), self.food.id)

	def test_get_rating(self):
		self.assertIsNone(get_order_rating(self.customer, self.food.id))
		rate_order(self.customer, self.food.id, 4)
		self.assertEqual(get_order_rating(self.customer, self.food.id).driver_rating, 4)
