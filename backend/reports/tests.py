import shutil
import tempfile

from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from common.testing import make_driver, make_image, make_order, make_user
from orders.models import Order
from reports.models import TransactionReport

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class ReportApiTests(TestCase):
	@classmethod
	def tearDownClass(cls):
		shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
		super().tearDownClass()

	def setUp(self):
		self.client = APIClient()
		self.customer = make_user('cust1')
		self.order = make_order(self.customer, Order.RIDE, status=Order.COMPLETED, driver=make_driver('d1'))
		self.url = f'/api/orders/{self.order.id}/reports/'
		self.client.force_authenticate(self.customer)

	def test_third_report_is_refused(self):
		for detail in ('Late', 'Rude'):
			response = self.client.post(self.url, {'category': 'DRIVER', 'detail': detail}, format='json')
			self.assertEqual(response.status_code, 201)

		response = self.client.post(self.url, {'category': 'DRIVER', 'detail': 'Again'}, format='json')

		self.assertEqual(response.status_code, 429)
		self.assertEqual(response.data['error'], 'quota_exceeded')
		self.assertEqual(TransactionReport.objects.count(), 2)

	def test_report_with_proof(self):
		response = self.client.post(
			self.url,
			{'category': 'DRIVER', 'detail': 'Wrong change', 'proof': make_image()},
			format='multipart',
		)

		self.assertEqual(response.status_code, 201)
		self.assertTrue(response.data['data']['report']['proof_ref'])
		self.assertEqual(response.data['data']['report']['status'], TransactionReport.PENDING)

	def test_list_own_reports(self):
		self.client.post(self.url, {'category': 'DRIVER', 'detail': 'Late'}, format='json')

		response = self.client.get(self.url)

		self.assertEqual(len(response.data['data']['reports']), 1)

	def test_stranger_gets_404(self):
		self.client.force_authenticate(make_user('stranger'))

		response = self.client.post(self.url, {'category': 'DRIVER', 'detail': 'x'}, format='json')

		self.assertEqual(response.status_code, 404)
		self.assertEqual(self.client.get(self.url).status_code, 404)

	def test_invalid_category(self):
		response = self.client.post(self.url, {'category': 'WEATHER', 'detail': 'x'}, format='json')
		self.assertEqual(response.status_code, 400)
