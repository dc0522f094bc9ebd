from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from common.testing import make_driver, make_user
from services import ledger
from tickets.models import TicketOrder, TicketTransaction


class TicketApiTests(TestCase):
	def setUp(self):
		self.client = APIClient()
		self.driver = make_driver('d1', tickets=3)
		self.admin = make_user('admin1', role=User.ADMIN)

	def test_balance_with_history(self):
		self.client.force_authenticate(self.driver)

		response = self.client.get('/api/tickets/')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['balance'], 3)
		self.assertEqual(len(response.data['data']['transactions']), 1)

	def test_customers_hold_no_tickets(self):
		self.client.force_authenticate(make_user('cust1'))
		self.assertEqual(self.client.get('/api/tickets/').status_code, 403)

	def test_purchase_request_then_admin_marks_paid(self):
		self.client.force_authenticate(self.driver)
		response = self.client.post('/api/tickets/orders/', {'quantity': 5}, format='json')
		self.assertEqual(response.status_code, 201)
		ticket_order_id = response.data['data']['order']['id']

		self.client.force_authenticate(self.admin)
		first = self.client.post(f'/api/tickets/admin/orders/{ticket_order_id}/mark-paid/')
		second = self.client.post(f'/api/tickets/admin/orders/{ticket_order_id}/mark-paid/')

		self.assertEqual(first.data['data']['order']['status'], TicketOrder.PAID)
		self.assertEqual(second.status_code, 200)
		self.assertEqual(ledger.get_balance(self.driver), 8)

	def test_purchase_below_minimum(self):
		self.client.force_authenticate(self.driver)
		response = self.client.post('/api/tickets/orders/', {'quantity': 1}, format='json')
		self.assertEqual(response.status_code, 400)

	def test_admin_grant_defaults(self):
		self.client.force_authenticate(self.admin)

		response = self.client.post('/api/tickets/admin/grant/', {'user_id': self.driver.id}, format='json')

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['data']['balance'], 6)
		entry = TicketTransaction.objects.filter(user=self.driver).first()
		self.assertEqual(entry.reference_id, 'GRANT')

	def test_admin_grant_to_customer_refused(self):
		self.client.force_authenticate(self.admin)
		response = self.client.post('/api/tickets/admin/grant/', {'user_id': make_user('cust1').id, 'amount': 2}, format='json')
		self.assertEqual(response.status_code, 400)

	def test_admin_grant_unknown_user(self):
		self.client.force_authenticate(self.admin)
		response = self.client.post('/api/tickets/admin/grant/', {'user_id': 9999}, format='json')
		self.assertEqual(response.status_code, 404)

	def test_grant_requires_admin(self):
		self.client.force_authenticate(self.driver)
		response = self.client.post('/api/tickets/admin/grant/', {'user_id': self.driver.id}, format='json')
		self.assertEqual(response.status_code, 403)

	def test_admin_balance_lookup(self):
		self.client.force_authenticate(self.admin)
		response = self.client.get(f'/api/tickets/admin/balance/{self.driver.id}/')

		self.assertEqual(response.data['data']['balance'], 3)
		self.assertEqual(response.data['data']['user_id'], self.driver.id)
