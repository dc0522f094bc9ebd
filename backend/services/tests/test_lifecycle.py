import shutil
import tempfile
from unittest import mock

from django.core.files.storage import default_storage
from django.db import DatabaseError
from django.test import TestCase, override_settings

from common.regions import CAMPUS_SUTOMO
from common.testing import make_driver, make_image, make_menu_item, make_order, make_store, make_user
from orders.models import DeliveryPricing, Order
from services import order_management as orders
from services.exceptions import (
	InsufficientTicketsError,
	NotFoundError,
	OrderValidationError,
	StateConflictError,
)
from services.ledger import get_balance
from tickets.models import TicketTransaction

PICKUP_LINK = 'https://maps.google.com/?q=3.5614,98.6577'
DROPOFF_LINK = 'https://maps.google.com/?q=3.5700,98.6600'


def ride_payload(**overrides):
	payload = {
		'order_type': Order.RIDE,
		'pickup_address': 'Gerbang kampus',
		'pickup_map_link': PICKUP_LINK,
		'pickup_region': CAMPUS_SUTOMO,
		'dropoff_address': 'Asrama putra',
		'dropoff_map_link': DROPOFF_LINK,
	}
	payload.update(overrides)
	return payload


@override_settings(ROUTING_ENABLED=False)
class CreateOrderTests(TestCase):
	def setUp(self):
		self.customer = make_user('cust1')

	def test_ride_starts_searching_with_estimate(self):
		result = orders.create_order(self.customer, ride_payload())
		order = result.order

		self.assertEqual(order.status, Order.SEARCHING_DRIVER)
		self.assertEqual(float(order.pickup_latitude), 3.5614)
		self.assertEqual(float(order.dropoff_longitude), 98.66)
		self.assertIsNotNone(order.estimated_distance_km)
		self.assertEqual(result.extra['estimate']['source'], 'haversine')
		# no pricing record yet: default formula, never below the base
		self.assertGreaterEqual(order.estimated_fare, 4000)

	def test_fare_snapshot_survives_pricing_change(self):
		DeliveryPricing.objects.create(under_1km=5000, km_1_to_1_5=6000)
		order = orders.create_order(self.customer, ride_payload()).order
		before = order.estimated_fare

		DeliveryPricing.objects.create(under_1km=9000, km_1_to_1_5=9500, km_1_5_to_2=9600, km_2_to_2_5=9700, km_2_5_to_3=9800)

		order.refresh_from_db()
		self.assertEqual(order.estimated_fare, before)

	def test_unresolvable_links_still_create(self):
		with mock.patch('services.order_management.lifecycle.resolve_coordinates', return_value=None):
			order = orders.create_order(
				self.customer,
				ride_payload(pickup_map_link='https://maps.app.goo.gl/x', dropoff_map_link='https://maps.app.goo.gl/y'),
			).order

		self.assertIsNone(order.pickup_latitude)
		self.assertIsNone(order.estimated_distance_km)
		self.assertEqual(order.estimated_fare, 4000)

	def test_ride_requires_addresses_and_region(self):
		with self.assertRaises(OrderValidationError):
			orders.create_order(self.customer, ride_payload(pickup_address=''))
		with self.assertRaises(OrderValidationError):
			orders.create_order(self.customer, ride_payload(pickup_region=None))
		with self.assertRaises(OrderValidationError):
			orders.create_order(self.customer, ride_payload(pickup_region='MARS'))
		self.assertFalse(Order.objects.exists())

	def test_unknown_type(self):
		with self.assertRaises(OrderValidationError):
			orders.create_order(self.customer, ride_payload(order_type='PARCEL'))

	def test_external_store_order(self):
		order = orders.create_order(self.customer, {
			'order_type': Order.FOOD_EXTERNAL_STORE,
			'external_store_name': 'Warung Bu Tini',
			'external_store_address': 'Jl. Setia Budi',
			'external_map_link': PICKUP_LINK,
			'pickup_region': CAMPUS_SUTOMO,
			'quantity': 2,
			'dropoff_address': 'Asrama putra',
		}).order

		self.assertEqual(order.status, Order.SEARCHING_DRIVER)
		self.assertEqual(order.relevant_region, CAMPUS_SUTOMO)
		self.assertEqual(order.pickup_address, 'Jl. Setia Budi')
		# no dropoff coordinates: flat fare
		self.assertIsNone(order.estimated_distance_km)

	def test_external_store_requires_name_address_quantity(self):
		with self.assertRaises(OrderValidationError):
			orders.create_order(self.customer, {
				'order_type': Order.FOOD_EXTERNAL_STORE,
				'external_store_name': 'Warung',
				'pickup_region': CAMPUS_SUTOMO,
				'quantity': 1,
			})

	def test_registered_store_order(self):
		store = make_store('store1', lat='3.561400', lng='98.657700')
		item = make_menu_item(store)

		order = orders.create_order(self.customer, {
			'order_type': Order.FOOD_REGISTERED_STORE,
			'store_id': store.id,
			'menu_item_id': item.id,
			'quantity': 1,
			'dropoff_address': 'Asrama putra',
			'dropoff_map_link': DROPOFF_LINK,
		}).order

		self.assertEqual(order.status, Order.WAITING_STORE_CONFIRM)
		self.assertEqual(order.store, store)
		self.assertEqual(order.menu_item, item)
		self.assertIsNotNone(order.estimated_distance_km)

	def test_registered_store_must_be_open_and_own_the_item(self):
		closed = make_store('closed', status='INACTIVE')
		other = make_store('other')
		item = make_menu_item(other)
		unavailable = make_menu_item(other, name='Es teh', is_available=False)

		for store, menu_item in ((closed, make_menu_item(closed)), (make_store('third'), item), (other, unavailable)):
			with self.assertRaises(OrderValidationError):
				orders.create_order(self.customer, {
					'order_type': Order.FOOD_REGISTERED_STORE,
					'store_id': store.id,
					'menu_item_id': menu_item.id,
					'quantity': 1,
				})

	def test_one_active_order_per_customer(self):
		first = orders.create_order(self.customer, ride_payload()).order

		with self.assertRaises(StateConflictError):
			orders.create_order(self.customer, ride_payload())

		Order.objects.filter(id=first.id).update(status=Order.COMPLETED)
		second = orders.create_order(self.customer, ride_payload()).order
		self.assertNotEqual(first.id, second.id)

	def test_concurrent_create_hits_the_constraint(self):
		make_order(self.customer, Order.RIDE)

		with mock.patch('services.order_management.lifecycle.get_active_customer_order', return_value=None):
			with self.assertRaises(StateConflictError):
				orders.create_order(self.customer, ride_payload())

		self.assertEqual(Order.objects.filter(customer=self.customer).count(), 1)


class CustomerCancelTests(TestCase):
	def setUp(self):
		self.customer = make_user('cust1')

	def test_cancel_searching_ride(self):
		order = make_order(self.customer, Order.RIDE)

		order = orders.cancel_by_customer(self.customer, order.id).order

		self.assertEqual(order.status, Order.CANCELLED)
		self.assertEqual(order.cancel_reason, Order.REASON_CUSTOMER_CANCELLED)
		self.assertIsNotNone(order.cancelled_at)

	def test_cancel_registered_only_before_store_confirms(self):
		store = make_store('store1')
		waiting = make_order(self.customer, Order.FOOD_REGISTERED_STORE, store=store)
		self.assertEqual(orders.cancel_by_customer(self.customer, waiting.id).order.status, Order.CANCELLED)

		cooking = make_order(self.customer, Order.FOOD_REGISTERED_STORE, status=Order.CONFIRMED_COOKING, store=store)
		with self.assertRaises(StateConflictError):
			orders.cancel_by_customer(self.customer, cooking.id)

	def test_cannot_cancel_after_driver_assigned(self):
		order = make_order(self.customer, Order.RIDE, status=Order.DRIVER_ASSIGNED, driver=make_driver('d1'))

		with self.assertRaises(StateConflictError):
			orders.cancel_by_customer(self.customer, order.id)
		order.refresh_from_db()
		self.assertEqual(order.status, Order.DRIVER_ASSIGNED)

	def test_other_customers_order_is_not_found(self):
		order = make_order(self.customer, Order.RIDE)
		with self.assertRaises(NotFoundError):
			orders.cancel_by_customer(make_user('cust2'), order.id)

	def test_cancel_loses_to_a_claim(self):
		order = make_order(self.customer, Order.RIDE)
		driver = make_driver('d1')

		def claim_first(*args, **kwargs):
			Order.objects.filter(id=order.id).update(status=Order.DRIVER_ASSIGNED, driver=driver)

		with mock.patch('services.order_management.lifecycle.ensure_transition', side_effect=claim_first):
			with self.assertRaises(StateConflictError):
				orders.cancel_by_customer(self.customer, order.id)

		order.refresh_from_db()
		self.assertEqual(order.status, Order.DRIVER_ASSIGNED)


class StoreFlowTests(TestCase):
	def setUp(self):
		self.customer = make_user('cust1')
		self.store = make_store('store1', tickets=1)
		self.order = make_order(self.customer, Order.FOOD_REGISTERED_STORE, store=self.store)

	def test_accept_then_ready(self):
		order = orders.accept_order(self.store, self.order.id).order
		self.assertEqual(order.status, Order.CONFIRMED_COOKING)
		self.assertIsNotNone(order.confirmed_at)

		order = orders.mark_ready(self.store, self.order.id).order
		self.assertEqual(order.status, Order.SEARCHING_DRIVER)
		# accepting spends nothing
		self.assertEqual(get_balance(self.store), 1)

	def test_accept_needs_a_ticket(self):
		broke = make_store('store2')
		order = make_order(make_user('cust2'), Order.FOOD_REGISTERED_STORE, store=broke)

		with self.assertRaises(InsufficientTicketsError):
			orders.accept_order(broke, order.id)
		order.refresh_from_db()
		self.assertEqual(order.status, Order.WAITING_STORE_CONFIRM)

	def test_reject_with_default_reason(self):
		order = orders.reject_order(self.store, self.order.id).order

		self.assertEqual(order.status, Order.REJECTED)
		self.assertEqual(order.rejection_reason, 'Rejected by store')

	def test_ready_requires_cooking(self):
		with self.assertRaises(StateConflictError):
			orders.mark_ready(self.store, self.order.id)

	def test_other_store_cannot_touch_order(self):
		with self.assertRaises(NotFoundError):
			orders.accept_order(make_store('store2', tickets=1), self.order.id)

	def test_terminal_order_cannot_be_rejected(self):
		orders.reject_order(self.store, self.order.id)
		with self.assertRaises(StateConflictError):
			orders.reject_order(self.store, self.order.id)

	def test_store_lists(self):
		done = make_order(make_user('cust2'), Order.FOOD_REGISTERED_STORE, status=Order.COMPLETED, store=self.store)

		self.assertEqual(list(orders.list_store_orders(self.store)), [self.order])
		self.assertEqual(set(orders.list_store_orders(self.store, history=True)), {self.order, done})


class DriverFlowTests(TestCase):
	@classmethod
	def setUpClass(cls):
		super().setUpClass()
		cls.media_root = tempfile.mkdtemp()
		cls.media_override = override_settings(MEDIA_ROOT=cls.media_root)
		cls.media_override.enable()

	@classmethod
	def tearDownClass(cls):
		cls.media_override.disable()
		shutil.rmtree(cls.media_root, ignore_errors=True)
		super().tearDownClass()

	def setUp(self):
		self.customer = make_user('cust1')
		self.driver = make_driver('d1', tickets=1)

	def _assigned(self, order_type=Order.RIDE, **fields):
		return make_order(self.customer, order_type, status=Order.DRIVER_ASSIGNED, driver=self.driver, **fields)

	def test_pickup_proof_moves_to_on_delivery(self):
		order = self._assigned()

		order = orders.submit_pickup_proof(self.driver, order.id, [make_image(), make_image('b.jpg', fmt='JPEG', content_type='image/jpeg')]).order

		self.assertEqual(order.status, Order.ON_DELIVERY)
		self.assertEqual(len(order.pickup_proof_refs), 2)
		self.assertTrue(all(default_storage.exists(ref) for ref in order.pickup_proof_refs))
		self.assertIsNotNone(order.picked_up_at)

	def test_pickup_proof_requires_an_image(self):
		order = self._assigned()
		with self.assertRaises(OrderValidationError):
			orders.submit_pickup_proof(self.driver, order.id, [])

	def test_non_image_proof_rejected(self):
		order = self._assigned()
		bogus = make_image()
		bogus.content_type = 'application/pdf'

		with self.assertRaises(OrderValidationError):
			orders.submit_pickup_proof(self.driver, order.id, [make_image(), bogus])
		order.refresh_from_db()
		self.assertEqual(order.status, Order.DRIVER_ASSIGNED)

	def test_proof_from_wrong_status(self):
		order = self._assigned()
		with self.assertRaises(StateConflictError):
			orders.submit_delivery_proof(self.driver, order.id, [make_image()])

	def test_other_driver_cannot_submit(self):
		order = self._assigned()
		with self.assertRaises(NotFoundError):
			orders.submit_pickup_proof(make_driver('d2'), order.id, [make_image()])

	def test_delivery_completes_and_consumes_driver_ticket(self):
		order = make_order(self.customer, Order.RIDE, status=Order.ON_DELIVERY, driver=self.driver)

		order = orders.submit_delivery_proof(self.driver, order.id, [make_image()]).order

		self.assertEqual(order.status, Order.COMPLETED)
		self.assertIsNotNone(order.completed_at)
		self.assertEqual(len(order.delivery_proof_refs), 1)
		self.assertEqual(get_balance(self.driver), 0)

	def test_registered_completion_consumes_store_ticket_too(self):
		store = make_store('store1', tickets=1)
		order = make_order(
			self.customer, Order.FOOD_REGISTERED_STORE, status=Order.ON_DELIVERY,
			driver=self.driver, store=store,
		)

		orders.submit_delivery_proof(self.driver, order.id, [make_image()])

		self.assertEqual(get_balance(self.driver), 0)
		self.assertEqual(get_balance(store), 0)

	def test_completion_may_overdraw(self):
		broke = make_driver('d2')
		order = make_order(self.customer, Order.RIDE, status=Order.ON_DELIVERY, driver=broke)

		orders.submit_delivery_proof(broke, order.id, [make_image()])

		self.assertEqual(get_balance(broke), -1)

	def test_completion_rolls_back_when_ledger_fails(self):
		order = make_order(self.customer, Order.RIDE, status=Order.ON_DELIVERY, driver=self.driver)

		with mock.patch('services.order_management.lifecycle.consume_for_order', side_effect=DatabaseError('ledger down')):
			with mock.patch('services.order_management.lifecycle.discard_proofs') as discard:
				with self.assertRaises(DatabaseError):
					orders.submit_delivery_proof(self.driver, order.id, [make_image()])

		order.refresh_from_db()
		self.assertEqual(order.status, Order.ON_DELIVERY)
		self.assertEqual(order.delivery_proof_refs, [])
		self.assertIsNone(order.completed_at)
		self.assertEqual(get_balance(self.driver), 1)
		self.assertEqual(discard.call_count, 1)

	def test_store_consumption_failure_rolls_back_driver_consumption(self):
		from services.ledger import ledger as ledger_module

		store = make_store('store1', tickets=1)
		order = make_order(
			self.customer, Order.FOOD_REGISTERED_STORE, status=Order.ON_DELIVERY,
			driver=self.driver, store=store,
		)
		real_apply = ledger_module._apply
		calls = []

		def flaky_apply(user, *args, **kwargs):
			calls.append(user.id)
			if len(calls) == 2:
				raise DatabaseError('store ledger down')
			return real_apply(user, *args, **kwargs)

		with mock.patch.object(ledger_module, '_apply', side_effect=flaky_apply):
			with self.assertRaises(DatabaseError):
				orders.submit_delivery_proof(self.driver, order.id, [make_image()])

		order.refresh_from_db()
		self.assertEqual(order.status, Order.ON_DELIVERY)
		self.assertEqual(get_balance(self.driver), 1)
		self.assertFalse(TicketTransaction.objects.filter(type=TicketTransaction.CONSUME).exists())

	def test_driver_cancels_external_order(self):
		order = self._assigned(Order.FOOD_EXTERNAL_STORE)

		order = orders.cancel_external_by_driver(self.driver, order.id, Order.REASON_STORE_CLOSED).order

		self.assertEqual(order.status, Order.CANCELLED)
		self.assertEqual(order.cancel_reason, Order.REASON_STORE_CLOSED)
		# cancelled for good, not back in the queue
		self.assertIsNone(orders.get_active_driver_order(self.driver))
		self.assertEqual(get_balance(self.driver), 1)

	def test_driver_cancel_other_requires_note(self):
		order = self._assigned(Order.FOOD_EXTERNAL_STORE)

		with self.assertRaises(OrderValidationError):
			orders.cancel_external_by_driver(self.driver, order.id, Order.REASON_OTHER)
		order = orders.cancel_external_by_driver(self.driver, order.id, Order.REASON_OTHER, 'Ban bocor').order
		self.assertEqual(order.cancel_note, 'Ban bocor')

	def test_driver_cancel_rejects_unknown_reason(self):
		order = self._assigned(Order.FOOD_EXTERNAL_STORE)
		with self.assertRaises(OrderValidationError):
			orders.cancel_external_by_driver(self.driver, order.id, 'BORED')

	def test_driver_cannot_cancel_rides(self):
		order = self._assigned()
		with self.assertRaises(StateConflictError):
			orders.cancel_external_by_driver(self.driver, order.id, Order.REASON_DRIVER_UNAVAILABLE)

	def test_driver_cannot_cancel_after_pickup(self):
		order = make_order(self.customer, Order.FOOD_EXTERNAL_STORE, status=Order.ON_DELIVERY, driver=self.driver)
		with self.assertRaises(StateConflictError):
			orders.cancel_external_by_driver(self.driver, order.id, Order.REASON_STORE_CLOSED)

	def test_driver_order_visibility(self):
		mine = self._assigned()
		open_order = make_order(make_user('cust2'), Order.RIDE)
		someone_elses = make_order(make_user('cust3'), Order.RIDE, status=Order.DRIVER_ASSIGNED, driver=make_driver('d2'))

		self.assertEqual(orders.get_driver_order(self.driver, mine.id), mine)
		self.assertEqual(orders.get_driver_order(self.driver, open_order.id), open_order)
		with self.assertRaises(NotFoundError):
			orders.get_driver_order(self.driver, someone_elses.id)

	def test_proofs_visible_to_parties_only(self):
		order = self._assigned()
		orders.submit_pickup_proof(self.driver, order.id, [make_image()])

		proofs = orders.get_order_proofs(self.customer, order.id)
		self.assertEqual(len(proofs['pickup']), 1)
		self.assertEqual(proofs['delivery'], [])
		with self.assertRaises(NotFoundError):
			orders.get_order_proofs(make_user('stranger'), order.id)
