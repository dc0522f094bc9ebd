from django.test import SimpleTestCase
from rest_framework import exceptions
from rest_framework.test import APIRequestFactory

from common.exceptions import api_exception_handler
from common.regions import CAMPUS_PANCING, CAMPUS_SUTOMO, CAMPUS_TUNTUNGAN, OTHER, REGIONS, matching_regions, regions_match
from common.utils import Coordinates, haversine_km
from services.exceptions import InsufficientTicketsError, ReportLimitReachedError, StateConflictError


class RegionMatchTests(SimpleTestCase):
	def test_reflexive(self):
		for region in REGIONS:
			self.assertTrue(regions_match(region, region))

	def test_symmetric(self):
		for a in REGIONS:
			for b in REGIONS:
				self.assertEqual(regions_match(a, b), regions_match(b, a))

	def test_other_is_wildcard(self):
		for region in REGIONS:
			self.assertTrue(regions_match(OTHER, region))

	def test_distinct_campuses_do_not_match(self):
		self.assertFalse(regions_match(CAMPUS_SUTOMO, CAMPUS_PANCING))
		self.assertFalse(regions_match(CAMPUS_TUNTUNGAN, CAMPUS_SUTOMO))

	def test_missing_region_never_matches(self):
		self.assertFalse(regions_match(None, OTHER))
		self.assertFalse(regions_match(CAMPUS_SUTOMO, ''))

	def test_matching_regions_for_queries(self):
		self.assertIsNone(matching_regions(OTHER))
		self.assertEqual(set(matching_regions(CAMPUS_SUTOMO)), {CAMPUS_SUTOMO, OTHER})


class GeoTests(SimpleTestCase):
	def test_from_values_requires_both(self):
		self.assertIsNone(Coordinates.from_values(None, 98.6))
		self.assertEqual(Coordinates.from_values('3.5', '98.6'), Coordinates(3.5, 98.6))

	def test_validity_range(self):
		self.assertTrue(Coordinates(-90, 180).is_valid())
		self.assertFalse(Coordinates(90.1, 0).is_valid())

	def test_haversine_roughly_one_degree_of_latitude(self):
		self.assertAlmostEqual(haversine_km(Coordinates(0, 0), Coordinates(1, 0)), 111.19, places=1)


class ExceptionEnvelopeTests(SimpleTestCase):
	def setUp(self):
		self.context = {'view': None, 'request': APIRequestFactory().get('/')}

	def test_service_errors_keep_their_status(self):
		cases = [
			(StateConflictError('taken', status='DRIVER_ASSIGNED'), 409, 'state_conflict'),
			(InsufficientTicketsError(), 402, 'quota_exceeded'),
			(ReportLimitReachedError(), 429, 'quota_exceeded'),
		]
		for exc, status_code, code in cases:
			response = api_exception_handler(exc, self.context)
			self.assertEqual(response.status_code, status_code)
			self.assertFalse(response.data['success'])
			self.assertEqual(response.data['error'], code)
			self.assertTrue(response.data['message'])

	def test_extra_fields_are_included(self):
		response = api_exception_handler(StateConflictError('taken', status='DRIVER_ASSIGNED'), self.context)
		self.assertEqual(response.data['status'], 'DRIVER_ASSIGNED')

	def test_drf_validation_error(self):
		response = api_exception_handler(exceptions.ValidationError({'quantity': ['required']}), self.context)

		self.assertEqual(response.status_code, 400)
		self.assertEqual(response.data['error'], 'validation_error')
		self.assertEqual(response.data['errors'], {'quantity': ['required']})

	def test_unhandled_error_hides_details(self):
		with self.assertLogs('common.exceptions', level='ERROR'):
			response = api_exception_handler(RuntimeError('secret stack'), self.context)

		self.assertEqual(response.status_code, 500)
		self.assertNotIn('secret', response.data['message'])
