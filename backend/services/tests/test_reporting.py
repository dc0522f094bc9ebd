import shutil
import tempfile

from django.core.files.storage import default_storage
from django.test import TestCase, override_settings

from common.testing import make_driver, make_image, make_order, make_user
from orders.models import Order
from reports.models import TransactionReport
from services.exceptions import NotFoundError, OrderValidationError, ReportLimitReachedError
from services.reporting import file_report, list_reports

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT, REPORT_LIMIT_PER_ORDER=2)
class FileReportTests(TestCase):
	@classmethod
	def tearDownClass(cls):
		shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
		super().tearDownClass()

	def setUp(self):
		self.customer = make_user('cust1')
		self.driver = make_driver('d1')
		self.order = make_order(self.customer, Order.RIDE, status=Order.COMPLETED, driver=self.driver)

	def test_two_reports_then_limit(self):
		file_report(self.customer, self.order.id, 'DRIVER', 'Driver was rude')
		file_report(self.customer, self.order.id, 'driver', 'Still waiting for change')

		with self.assertRaises(ReportLimitReachedError):
			file_report(self.customer, self.order.id, 'DRIVER', 'Third time')

		self.assertEqual(TransactionReport.objects.filter(reporter=self.customer).count(), 2)

	def test_limit_is_per_reporter(self):
		file_report(self.customer, self.order.id, 'DRIVER', 'one')
		file_report(self.customer, self.order.id, 'DRIVER', 'two')

		report = file_report(self.driver, self.order.id, 'CUSTOMER', 'Customer not at dropoff')
		self.assertEqual(report.status, TransactionReport.PENDING)

	def test_report_never_changes_order(self):
		file_report(self.customer, self.order.id, 'DRIVER', 'Late')

		self.order.refresh_from_db()
		self.assertEqual(self.order.status, Order.COMPLETED)

	def test_non_party_gets_not_found(self):
		with self.assertRaises(NotFoundError):
			file_report(make_user('stranger'), self.order.id, 'DRIVER', 'Nosy')
		with self.assertRaises(NotFoundError):
			file_report(self.customer, 9999, 'DRIVER', 'Missing')

	def test_invalid_category_and_blank_detail(self):
		with self.assertRaises(OrderValidationError):
			file_report(self.customer, self.order.id, 'WEATHER', 'Rain')
		with self.assertRaises(OrderValidationError):
			file_report(self.customer, self.order.id, 'DRIVER', '   ')

	def test_proof_is_stored(self):
		report = file_report(self.customer, self.order.id, 'DRIVER', 'Photo attached', proof=make_image())

		self.assertTrue(report.proof_ref.startswith('proofs/reports/'))
		self.assertTrue(default_storage.exists(report.proof_ref))

	def test_proof_discarded_when_limit_reached(self):
		file_report(self.customer, self.order.id, 'DRIVER', 'one')
		file_report(self.customer, self.order.id, 'DRIVER', 'two')
		before = self._stored_reports()

		with self.assertRaises(ReportLimitReachedError):
			file_report(self.customer, self.order.id, 'DRIVER', 'three', proof=make_image())

		self.assertEqual(self._stored_reports(), before)

	def _stored_reports(self):
		if not default_storage.exists('proofs/reports'):
			return set()
		return set(default_storage.listdir('proofs/reports')[1])

	def test_list_reports_returns_own_only(self):
		file_report(self.customer, self.order.id, 'DRIVER', 'mine')
		file_report(self.driver, self.order.id, 'CUSTOMER', 'theirs')

		self.assertEqual([report.detail for report in list_reports(self.customer, self.order.id)], ['mine'])
