from unittest import mock

from asgiref.sync import sync_to_async
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase, TestCase

from accounts.models import User
from common.testing import make_order, make_user
from orders.models import Order
from realtime.consumers import OrdersConsumer
from realtime.notifications import broadcast_orders_changed, notify_orders_changed


class OrdersConsumerTests(SimpleTestCase):
	def _communicator(self, user):
		communicator = WebsocketCommunicator(OrdersConsumer.as_asgi(), '/ws/orders/')
		communicator.scope['user'] = user
		return communicator

	async def test_anonymous_is_refused(self):
		communicator = self._communicator(AnonymousUser())

		connected, _ = await communicator.connect()

		self.assertFalse(connected)

	async def test_receives_orders_changed(self):
		communicator = self._communicator(User(username='d1', role=User.DRIVER))
		connected, _ = await communicator.connect()
		self.assertTrue(connected)
		hello = await communicator.receive_json_from()
		self.assertEqual(hello['type'], 'connection_established')

		sent = await sync_to_async(broadcast_orders_changed)(7, Order.DRIVER_ASSIGNED, Order.RIDE)

		self.assertTrue(sent)
		event = await communicator.receive_json_from()
		self.assertEqual(event, {
			'type': 'orders_changed',
			'order_id': 7,
			'status': Order.DRIVER_ASSIGNED,
			'order_type': Order.RIDE,
		})
		await communicator.disconnect()

	async def test_ping(self):
		communicator = self._communicator(User(username='s1', role=User.STORE))
		await communicator.connect()
		await communicator.receive_json_from()

		await communicator.send_json_to({'type': 'ping'})
		self.assertEqual(await communicator.receive_json_from(), {'type': 'pong'})

		await communicator.send_json_to({'type': 'dance'})
		self.assertEqual((await communicator.receive_json_from())['type'], 'error')
		await communicator.disconnect()


class NotifyOnCommitTests(TestCase):
	def test_broadcast_waits_for_commit(self):
		order = make_order(make_user('cust1'), Order.RIDE)

		with mock.patch('realtime.notifications.broadcast_orders_changed') as broadcast:
			with self.captureOnCommitCallbacks(execute=True):
				notify_orders_changed(order)
				broadcast.assert_not_called()

		broadcast.assert_called_once_with(order.id, Order.SEARCHING_DRIVER, Order.RIDE)

	def test_missing_channel_layer_is_not_an_error(self):
		with mock.patch('realtime.notifications.get_channel_layer', return_value=None):
			self.assertFalse(broadcast_orders_changed(1, Order.COMPLETED, Order.RIDE))
