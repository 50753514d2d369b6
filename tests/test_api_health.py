"""HTTP tests for the health check and root route."""

import unittest
from unittest.mock import patch

from studentms import __version__
from tests.support import API, ApiTestCase


class TestHealth(ApiTestCase):
    def test_health_reports_database(self) -> None:
        response = self.client.get(f"{API}/health/")
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(
            response.json(),
            {"status": "ok", "environment": "dev", "database": "connected", "version": __version__},
        )

    def test_unreachable_database_is_degraded(self) -> None:
        with patch("studentms.api.v1.health.ping", return_value=False):
            response = self.client.get(f"{API}/health/")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "degraded")
        self.assertEqual(response.json()["database"], "disconnected")

    def test_root(self) -> None:
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("message", response.json())


if __name__ == "__main__":
    unittest.main()
