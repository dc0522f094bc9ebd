from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from common.utils import Coordinates
from services.geocoding import extract_direct, extract_from_body, resolve_coordinates


class FakeRaw:
	"""Hands out the body in fixed chunks, or forever when `endless` is set."""

	def __init__(self, body=b'', chunk=8192, endless=False, on_read=None):
		self.body = body
		self.chunk = chunk
		self.endless = endless
		self.on_read = on_read
		self.reads = []

	def read1(self, amt=None, decode_content=None):
		self.reads.append(amt)
		if self.on_read:
			self.on_read()
		if self.endless:
			return self.body[:amt]
		piece, self.body = self.body[:min(amt, self.chunk)], self.body[min(amt, self.chunk):]
		return piece


class FakeResponse:
	def __init__(self, location=None, text='', raw=None):
		self.headers = {'Location': location} if location else {}
		self.raw = raw or FakeRaw(text.encode('utf-8'))
		self.encoding = 'utf-8'
		self.closed = False

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.closed = True


def _response(location=None, text='', raw=None):
	return FakeResponse(location=location, text=text, raw=raw)


class FakeSession:
	"""Serves canned responses per URL and records every request."""

	def __init__(self, routes):
		self.routes = routes
		self.calls = []
		self.served = []

	def get(self, url, allow_redirects=True, timeout=None, headers=None, stream=False):
		self.calls.append((url, allow_redirects, timeout, stream))
		response = self.routes.get(url) or _response()
		if callable(response):
			response = response()
		self.served.append(response)
		return response


class FakeClock:
	def __init__(self):
		self.now = 100.0

	def __call__(self):
		return self.now

	def tick(self, seconds=0.5):
		self.now += seconds


class DirectExtractionTests(SimpleTestCase):
	def test_query_pair(self):
		self.assertEqual(
			extract_direct('https://maps.google.com/?q=3.5952,98.6722'),
			Coordinates(3.5952, 98.6722),
		)

	def test_query_pair_with_encoded_comma(self):
		self.assertEqual(
			extract_direct('https://www.google.com/maps/search/?api=1&q=-6.2%2C106.8166'),
			Coordinates(-6.2, 106.8166),
		)

	def test_query_pair_with_explicit_signs(self):
		self.assertEqual(
			extract_direct('https://maps.google.com/?q=+3.59,+98.67'),
			Coordinates(3.59, 98.67),
		)
		self.assertEqual(
			extract_direct('https://maps.google.com/?q=-6.2,+106.8'),
			Coordinates(-6.2, 106.8),
		)

	def test_at_marker(self):
		self.assertEqual(
			extract_direct('https://www.google.com/maps/place/Kampus/@3.5614,98.6577,17z'),
			Coordinates(3.5614, 98.6577),
		)

	def test_query_pair_wins_over_at_marker(self):
		self.assertEqual(
			extract_direct('https://maps.google.com/@1.0,2.0,15z?q=3.0,4.0'),
			Coordinates(3.0, 4.0),
		)

	def test_out_of_range_pair_is_discarded(self):
		self.assertIsNone(extract_direct('https://maps.google.com/?q=95.1,98.6'))
		self.assertIsNone(extract_direct('https://maps.google.com/?q=3.1,181.0'))

	def test_plain_text_has_no_coordinates(self):
		self.assertIsNone(extract_direct('depan masjid kampus'))

	def test_body_prefers_last_bang_marker(self):
		body = 'default !3d1.0!4d2.0 ... corrected !3d3.5952!4d98.6722 ... @9.0,9.0'
		self.assertEqual(extract_from_body(body), Coordinates(3.5952, 98.6722))

	def test_body_falls_back_to_last_at_marker(self):
		body = '<a href="/maps/@1.0,2.0,10z">x</a><link href="/maps/@3.25,98.5,17z">'
		self.assertEqual(extract_from_body(body), Coordinates(3.25, 98.5))


@override_settings(GEOCODER_MAX_HOPS=5, GEOCODER_HOP_TIMEOUT=2)
class ResolveCoordinatesTests(SimpleTestCase):
	def test_direct_link_needs_no_network(self):
		session = FakeSession({})
		coords = resolve_coordinates('https://maps.google.com/?q=3.5952,98.6722', session=session)

		self.assertEqual(coords, Coordinates(3.5952, 98.6722))
		self.assertEqual(session.calls, [])

	def test_redirect_chain_ending_in_query_pair(self):
		session = FakeSession({
			'https://maps.app.goo.gl/abc': _response(location='https://goo.gl/maps/xyz'),
			'https://goo.gl/maps/xyz': _response(location='https://maps.google.com/?q=3.5614,98.6577'),
		})

		coords = resolve_coordinates('https://maps.app.goo.gl/abc', session=session)

		self.assertEqual(coords, Coordinates(3.5614, 98.6577))
		self.assertEqual(len(session.calls), 2)
		# hops never auto-follow and are time-boxed
		self.assertTrue(all(not follow and timeout == 2 for _, follow, timeout, _ in session.calls))

	def test_relative_location_is_joined(self):
		session = FakeSession({
			'https://short.example/a': _response(location='/maps/@3.1,98.2,12z'),
		})
		self.assertEqual(
			resolve_coordinates('https://short.example/a', session=session),
			Coordinates(3.1, 98.2),
		)

	def test_meta_refresh_is_followed(self):
		body = '<html><meta http-equiv="refresh" content="0; url=https://maps.google.com/?q=3.6,98.7"></html>'
		session = FakeSession({
			'https://short.example/m': _response(text=body),
		})
		self.assertEqual(
			resolve_coordinates('https://short.example/m', session=session),
			Coordinates(3.6, 98.7),
		)

	def test_body_heuristics_when_no_redirect(self):
		body = 'window.APP_INITIALIZATION_STATE=[[[1.0,2.0]]] !3d1.1!4d2.2 !3d3.5952!4d98.6722'
		session = FakeSession({
			'https://short.example/b': _response(text=body),
		})
		self.assertEqual(
			resolve_coordinates('https://short.example/b', session=session),
			Coordinates(3.5952, 98.6722),
		)

	def test_hop_cap_then_one_final_following_request(self):
		routes = {
			f'https://loop.example/{i}': _response(location=f'https://loop.example/{i + 1}')
			for i in range(5)
		}
		routes['https://loop.example/5'] = _response(location='https://loop.example/6')
		routes['https://loop.example/6'] = _response(location='https://maps.google.com/?q=3.3,98.3')
		session = FakeSession(routes)

		coords = resolve_coordinates('https://loop.example/0', session=session)

		self.assertEqual(coords, Coordinates(3.3, 98.3))
		walked = [call[0] for call in session.calls[:5]]
		followed = [call[0] for call in session.calls[5:]]
		self.assertEqual(walked, [f'https://loop.example/{i}' for i in range(5)])
		self.assertEqual(followed, [
			'https://loop.example/5',
			'https://loop.example/6',
			'https://maps.google.com/?q=3.3,98.3',
		])
		# redirects are walked by hand even on the final request
		self.assertTrue(all(not follow and stream for _, follow, _, stream in session.calls))

	def test_unresolvable_returns_none(self):
		session = FakeSession({
			'https://short.example/none': _response(text='<html>nothing here</html>'),
		})
		self.assertIsNone(resolve_coordinates('https://short.example/none', session=session))

	def test_network_failure_aborts_without_retry(self):
		session = mock.Mock()
		session.get.side_effect = requests.ConnectionError('unreachable')

		self.assertIsNone(resolve_coordinates('https://short.example/down', session=session))
		self.assertEqual(session.get.call_count, 1)

	def test_blank_and_non_url_inputs(self):
		session = FakeSession({})
		self.assertIsNone(resolve_coordinates('', session=session))
		self.assertIsNone(resolve_coordinates('   ', session=session))
		self.assertIsNone(resolve_coordinates('dekat kantin', session=session))
		self.assertEqual(session.calls, [])

	def test_responses_are_closed(self):
		session = FakeSession({
			'https://short.example/a': _response(location='https://short.example/b'),
			'https://short.example/b': _response(text='<html>nothing here</html>'),
		})

		resolve_coordinates('https://short.example/a', session=session)

		self.assertTrue(session.served)
		self.assertTrue(all(response.closed for response in session.served))


@override_settings(GEOCODER_MAX_HOPS=5, GEOCODER_HOP_TIMEOUT=1)
class BoundedBodyReadTests(SimpleTestCase):
	def test_trickling_body_is_cut_at_the_hop_deadline(self):
		clock = FakeClock()
		raw = FakeRaw(b'<html>....', endless=True, on_read=clock.tick)
		session = FakeSession({'https://slow.example/page': _response(raw=raw)})

		with mock.patch('services.geocoding.resolver.time.monotonic', clock):
			coords = resolve_coordinates('https://slow.example/page', session=session)

		self.assertIsNone(coords)
		# one walk hop plus the final request, each stops reading after 1s of 0.5s reads
		self.assertEqual(len(session.calls), 2)
		self.assertEqual(len(raw.reads), 4)
		self.assertLessEqual(clock.now - 100.0, 2.0)

	@override_settings(GEOCODER_MAX_BODY_BYTES=64)
	def test_body_beyond_byte_cap_is_not_read(self):
		body = ('x' * 100 + '!3d3.5952!4d98.6722').encode('utf-8')
		raws = []

		def page():
			raws.append(FakeRaw(body, chunk=16))
			return _response(raw=raws[-1])

		session = FakeSession({'https://big.example/page': page})

		self.assertIsNone(resolve_coordinates('https://big.example/page', session=session))
		self.assertEqual(len(raws), 2)
		for raw in raws:
			self.assertEqual(raw.reads, [64, 48, 32, 16])
			self.assertEqual(len(raw.body), len(body) - 64)

	@override_settings(GEOCODER_MAX_BODY_BYTES=64)
	def test_coordinates_within_byte_cap_are_found(self):
		raw = FakeRaw(b'!3d3.5952!4d98.6722' + b'x' * 200, chunk=16)
		session = FakeSession({'https://big.example/page': _response(raw=raw)})

		self.assertEqual(
			resolve_coordinates('https://big.example/page', session=session),
			Coordinates(3.5952, 98.6722),
		)
