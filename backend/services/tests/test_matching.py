from unittest import mock

from django.test import TestCase, override_settings

from common.regions import CAMPUS_PANCING, CAMPUS_SUTOMO, OTHER, regions_match
from common.testing import give_tickets, make_driver, make_menu_item, make_order, make_store, make_user
from drivers.models import DriverAvailability
from orders.models import Order
from services.exceptions import (
	InsufficientTicketsError,
	NotFoundError,
	OrderValidationError,
	StateConflictError,
)
from services.matching import claim_order, list_available_orders
from services.matching import claims


@override_settings(ROUTING_ENABLED=False)
class AvailableOrdersTests(TestCase):
	def setUp(self):
		self.open_store = make_store('store_open', region=CAMPUS_SUTOMO)
		self.closed_store = make_store('store_closed', region=CAMPUS_SUTOMO, status='INACTIVE')
		self.far_store = make_store('store_far', region=CAMPUS_PANCING)

		self.ride_here = make_order(make_user('c1'), Order.RIDE, pickup_region=CAMPUS_SUTOMO)
		self.ride_other = make_order(make_user('c2'), Order.RIDE, pickup_region=OTHER)
		self.ride_far = make_order(make_user('c3'), Order.RIDE, pickup_region=CAMPUS_PANCING)
		self.external_here = make_order(make_user('c4'), Order.FOOD_EXTERNAL_STORE, pickup_region=CAMPUS_SUTOMO)
		self.registered_open = make_order(
			make_user('c5'), Order.FOOD_REGISTERED_STORE, status=Order.SEARCHING_DRIVER,
			store=self.open_store, pickup_region=None,
		)
		self.registered_closed = make_order(
			make_user('c6'), Order.FOOD_REGISTERED_STORE, status=Order.SEARCHING_DRIVER,
			store=self.closed_store, pickup_region=None,
		)
		self.registered_far = make_order(
			make_user('c7'), Order.FOOD_REGISTERED_STORE, status=Order.SEARCHING_DRIVER,
			store=self.far_store, pickup_region=None,
		)
		# not open for claiming
		self.cooking = make_order(
			make_user('c8'), Order.FOOD_REGISTERED_STORE, status=Order.CONFIRMED_COOKING,
			store=self.open_store,
		)
		self.taken = make_order(
			make_user('c9'), Order.RIDE, status=Order.DRIVER_ASSIGNED, driver=make_driver('busy'),
		)

	def _ids(self, driver):
		return {item.order.id for item in list_available_orders(driver).orders}

	def test_regional_driver_sees_own_region_and_wildcards(self):
		driver = make_driver('d1', region=CAMPUS_SUTOMO)
		self.assertEqual(
			self._ids(driver),
			{self.ride_here.id, self.ride_other.id, self.external_here.id, self.registered_open.id},
		)

	def test_wildcard_driver_sees_every_region(self):
		driver = make_driver('d1', region=OTHER)
		self.assertEqual(
			self._ids(driver),
			{
				self.ride_here.id, self.ride_other.id, self.ride_far.id, self.external_here.id,
				self.registered_open.id, self.registered_far.id,
			},
		)

	def test_listing_matches_pairwise_region_rule(self):
		driver = make_driver('d1', region=CAMPUS_PANCING)
		listed = self._ids(driver)
		for order in Order.objects.filter(status=Order.SEARCHING_DRIVER, driver__isnull=True):
			store_open = order.order_type != Order.FOOD_REGISTERED_STORE or order.store.store_availability.status == 'ACTIVE'
			expected = store_open and regions_match(CAMPUS_PANCING, order.relevant_region)
			self.assertEqual(order.id in listed, expected, order)

	def test_inactive_driver_gets_empty_list_with_message(self):
		driver = make_driver('d1', status=DriverAvailability.INACTIVE, tickets=2)

		result = list_available_orders(driver)

		self.assertEqual(result.orders, [])
		self.assertTrue(result.message)
		self.assertEqual(result.balance, 2)

	def test_driver_without_region(self):
		driver = make_driver('d1', region=None)
		with self.assertRaises(OrderValidationError):
			list_available_orders(driver)

	def test_reports_active_order_and_balance(self):
		driver = make_driver('d1', tickets=4)
		make_order(make_user('c10'), Order.RIDE, status=Order.ON_DELIVERY, driver=driver)

		result = list_available_orders(driver)

		self.assertTrue(result.has_active)
		self.assertEqual(result.balance, 4)

	def test_orders_with_coordinates_carry_an_estimate(self):
		Order.objects.filter(id=self.ride_here.id).update(
			pickup_latitude='3.561400', pickup_longitude='98.657700',
			dropoff_latitude='3.570000', dropoff_longitude='98.660000',
		)
		driver = make_driver('d1')

		items = {item.order.id: item for item in list_available_orders(driver).orders}

		self.assertIsNotNone(items[self.ride_here.id].distance_km)
		self.assertIsNotNone(items[self.ride_here.id].fare)
		self.assertIsNone(items[self.ride_other.id].fare)


class ClaimOrderTests(TestCase):
	def setUp(self):
		self.customer = make_user('cust1')
		self.order = make_order(self.customer, Order.RIDE, pickup_region=CAMPUS_SUTOMO)

	def test_claim_binds_driver_without_spending_tickets(self):
		driver = make_driver('d1', tickets=1)

		order = claim_order(driver, self.order.id)

		self.assertEqual(order.status, Order.DRIVER_ASSIGNED)
		self.assertEqual(order.driver, driver)
		self.assertIsNotNone(order.assigned_at)
		self.assertEqual(claims.get_balance(driver), 1)

	def test_zero_balance_is_refused_and_order_untouched(self):
		driver = make_driver('d1', tickets=0)

		with self.assertRaises(InsufficientTicketsError):
			claim_order(driver, self.order.id)

		self.order.refresh_from_db()
		self.assertEqual(self.order.status, Order.SEARCHING_DRIVER)
		self.assertIsNone(self.order.driver)

	def test_balance_checked_before_existence(self):
		driver = make_driver('d1', tickets=0)
		with self.assertRaises(InsufficientTicketsError):
			claim_order(driver, 9999)

	def test_missing_order(self):
		driver = make_driver('d1', tickets=1)
		with self.assertRaises(NotFoundError):
			claim_order(driver, 9999)

	def test_region_mismatch(self):
		driver = make_driver('d1', region=CAMPUS_PANCING, tickets=1)

		with self.assertRaises(StateConflictError):
			claim_order(driver, self.order.id)
		self.order.refresh_from_db()
		self.assertIsNone(self.order.driver)

	def test_wildcard_order_is_claimable_from_any_region(self):
		order = make_order(make_user('cust2'), Order.RIDE, pickup_region=OTHER)
		driver = make_driver('d1', region=CAMPUS_PANCING, tickets=1)

		self.assertEqual(claim_order(driver, order.id).driver, driver)

	def test_not_open_order(self):
		cooking = make_order(
			make_user('cust2'), Order.FOOD_REGISTERED_STORE, status=Order.CONFIRMED_COOKING,
			store=make_store('store1'),
		)
		driver = make_driver('d1', tickets=1)

		with self.assertRaises(StateConflictError):
			claim_order(driver, cooking.id)

	def test_claimed_order_rejects_later_drivers(self):
		drivers = [make_driver(f'd{i}', tickets=1) for i in range(5)]
		winners, losers = [], []

		for driver in drivers:
			try:
				claim_order(driver, self.order.id)
				winners.append(driver)
			except StateConflictError:
				losers.append(driver)

		self.assertEqual(len(winners), 1)
		self.assertEqual(len(losers), 4)
		self.order.refresh_from_db()
		self.assertEqual(self.order.driver, winners[0])

	def test_lost_race_after_checks_passed(self):
		# driver A claims between driver B's checks and B's UPDATE
		driver_a = make_driver('da', tickets=1)
		driver_b = make_driver('db', tickets=1)
		state = {'raced': False}

		def racing_match(a, b):
			if not state['raced']:
				state['raced'] = True
				claim_order(driver_a, self.order.id)
			return regions_match(a, b)

		with mock.patch('services.matching.claims.regions_match', side_effect=racing_match):
			with self.assertRaises(StateConflictError):
				claim_order(driver_b, self.order.id)

		self.order.refresh_from_db()
		self.assertEqual(self.order.driver, driver_a)
		self.assertEqual(self.order.status, Order.DRIVER_ASSIGNED)

	def test_driver_cannot_hold_two_active_orders(self):
		driver = make_driver('d1', tickets=2)
		claim_order(driver, self.order.id)
		second = make_order(make_user('cust2'), Order.RIDE, pickup_region=CAMPUS_SUTOMO)

		with self.assertRaises(StateConflictError):
			claim_order(driver, second.id)

		second.refresh_from_db()
		self.assertEqual(second.status, Order.SEARCHING_DRIVER)
		self.assertIsNone(second.driver)

	def test_registered_order_uses_store_region(self):
		store = make_store('store1', region=CAMPUS_PANCING)
		item = make_menu_item(store)
		order = make_order(
			make_user('cust2'), Order.FOOD_REGISTERED_STORE, status=Order.SEARCHING_DRIVER,
			store=store, menu_item=item, pickup_region=CAMPUS_SUTOMO,
		)
		give_tickets(store, 1)

		with self.assertRaises(StateConflictError):
			claim_order(make_driver('d1', region=CAMPUS_SUTOMO, tickets=1), order.id)
		self.assertEqual(claim_order(make_driver('d2', region=CAMPUS_PANCING, tickets=1), order.id).store, store)
