#!/usr/bin/env python3
"""
Test suite for TLE source parsing and fetching
"""

import json
import unittest
from unittest.mock import MagicMock, patch

import requests

from iss_tracker.errors import FormatFailure, NetworkFailure
from iss_tracker.tle_source import (
    fetch_iss_tle,
    first_success,
    parse_raw_text,
    parse_structured,
    parse_tle,
)


class TestTLEParsing(unittest.TestCase):
    """Test cases for the two accepted TLE shapes"""

    def setUp(self):
        """Set up ISS TLE data for testing"""
        self.iss_line1 = "1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995"
        self.iss_line2 = "2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598"
        self.iss_name = "ISS (ZARYA)"

    def test_raw_text_with_name(self):
        """Name line preceding the element lines is kept"""
        text = f"{self.iss_name}\n{self.iss_line1}\n{self.iss_line2}\n"
        tle = parse_tle(text)

        self.assertEqual(tle.name, self.iss_name)
        self.assertEqual(tle.line1, self.iss_line1)
        self.assertEqual(tle.line2, self.iss_line2)

    def test_raw_text_without_name(self):
        """Two bare element lines have no name"""
        tle = parse_tle(f"{self.iss_line1}\n{self.iss_line2}")

        self.assertIsNone(tle.name)
        self.assertEqual(tle.line1, self.iss_line1)

    def test_raw_text_with_catalog_line(self):
        """A 0-prefixed line before the elements is not a name"""
        tle = parse_tle(f"0 ISS (ZARYA)\n{self.iss_line1}\n{self.iss_line2}")

        self.assertIsNone(tle.name)
        self.assertEqual(tle.line2, self.iss_line2)

    def test_raw_text_trims_and_skips_blank_lines(self):
        """Whitespace and blank lines around the set are ignored"""
        text = f"\r\n  {self.iss_name}  \r\n\r\n{self.iss_line1}\r\n{self.iss_line2}  \r\n"
        tle = parse_tle(text)

        self.assertEqual(tle.name, self.iss_name)
        self.assertEqual(tle.line2, self.iss_line2)

    def test_raw_text_requires_adjacent_lines(self):
        """A line 1 must be directly followed by a line 2"""
        text = f"{self.iss_line1}\nSOMETHING ELSE\n{self.iss_line2}"
        self.assertIsNone(parse_raw_text(text))

    def test_structured_with_header(self):
        """Structured input takes the name from header"""
        text = json.dumps({"header": "ISS", "line1": self.iss_line1, "line2": self.iss_line2})
        tle = parse_tle(text)

        self.assertEqual(tle.name, "ISS")
        self.assertEqual(tle.line1, self.iss_line1)
        self.assertEqual(tle.line2, self.iss_line2)

    def test_structured_with_name(self):
        """Structured input also accepts the name field"""
        text = json.dumps({"name": "iss", "line1": self.iss_line1, "line2": self.iss_line2})
        self.assertEqual(parse_tle(text).name, "iss")

    def test_structured_prefers_header(self):
        """header wins when both name fields are present"""
        text = json.dumps({
            "name": "iss",
            "header": self.iss_name,
            "line1": self.iss_line1,
            "line2": self.iss_line2,
        })
        self.assertEqual(parse_tle(text).name, self.iss_name)

    def test_structured_without_name(self):
        """Missing name fields give no name"""
        text = json.dumps({"line1": self.iss_line1, "line2": self.iss_line2})
        self.assertIsNone(parse_tle(text).name)

    def test_structured_rejects_raw_text(self):
        """The structured attempt does not match plain text"""
        self.assertIsNone(parse_structured(f"{self.iss_line1}\n{self.iss_line2}"))

    def test_structured_rejects_bad_markers(self):
        """Lines without their 1/2 markers do not form a TLE"""
        text = json.dumps({"line1": "X 25544U", "line2": self.iss_line2})
        self.assertIsNone(parse_structured(text))
        with self.assertRaises(FormatFailure):
            parse_tle(text)

    def test_unrecognized_text(self):
        """Text matching neither shape fails"""
        with self.assertRaises(FormatFailure) as ctx:
            parse_tle("<html>Service unavailable</html>")
        self.assertEqual(str(ctx.exception), "Unexpected TLE format.")

    def test_first_success_order(self):
        """Parsers are tried in order and the first match wins"""
        calls = []

        def never(text):
            calls.append("never")
            return None

        def always(text):
            calls.append("always")
            return parse_raw_text(f"{self.iss_line1}\n{self.iss_line2}")

        def unreachable(text):
            calls.append("unreachable")
            return None

        tle = first_success([never, always, unreachable], "ignored")

        self.assertEqual(tle.line1, self.iss_line1)
        self.assertEqual(calls, ["never", "always"])


class TestTLEFetch(unittest.TestCase):
    """Test cases for fetching the ISS TLE"""

    def setUp(self):
        self.payload = {
            "requested_timestamp": 1694872149,
            "tle_timestamp": 1694872149,
            "id": "25544",
            "name": "iss",
            "header": "ISS (ZARYA)",
            "line1": "1 25544U 98067A   23259.57580000  .00012022  00000-0  21844-3 0  9995",
            "line2": "2 25544  51.6416 220.9944 0004263 122.0101 312.2755 15.49541986415598",
        }

    @patch('iss_tracker.tle_source.requests.get')
    def test_fetch_structured(self, mock_get):
        """A JSON TLE response is parsed"""
        mock_get.return_value = MagicMock(text=json.dumps(self.payload))

        tle = fetch_iss_tle(url="https://example.test/tles", timeout=3)

        mock_get.assert_called_once_with("https://example.test/tles", timeout=3)
        self.assertEqual(tle.name, "ISS (ZARYA)")
        self.assertEqual(tle.line1, self.payload["line1"])

    @patch('iss_tracker.tle_source.requests.get')
    def test_fetch_raw_text(self, mock_get):
        """A plain-text TLE response is parsed"""
        text = "ISS (ZARYA)\n{line1}\n{line2}\n".format(**self.payload)
        mock_get.return_value = MagicMock(text=text)

        tle = fetch_iss_tle()
        self.assertEqual(tle.name, "ISS (ZARYA)")

    @patch('iss_tracker.tle_source.requests.get')
    def test_fetch_network_error(self, mock_get):
        """Transport errors surface as NetworkFailure"""
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with self.assertRaises(NetworkFailure) as ctx:
            fetch_iss_tle()
        self.assertIn("connection refused", str(ctx.exception))

    @patch('iss_tracker.tle_source.requests.get')
    def test_fetch_http_error(self, mock_get):
        """Non-success status codes surface as NetworkFailure"""
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
        mock_get.return_value = response

        with self.assertRaises(NetworkFailure):
            fetch_iss_tle()

    @patch('iss_tracker.tle_source.requests.get')
    def test_fetch_unexpected_body(self, mock_get):
        """An unparseable body surfaces as FormatFailure"""
        mock_get.return_value = MagicMock(text='{"error": "not found"}')

        with self.assertRaises(FormatFailure):
            fetch_iss_tle()


if __name__ == '__main__':
    unittest.main()
