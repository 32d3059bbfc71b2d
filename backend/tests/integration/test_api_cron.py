"""
Integration tests for cron endpoints.
"""

import pytest
from unittest.mock import patch, AsyncMock, MagicMock

from wastewise.api import cron


@pytest.fixture
def refresh():
    with patch("wastewise.api.cron.refresh_food_statuses", new_callable=AsyncMock) as mock:
        mock.return_value = {"checked": 4, "updated": 1, "date": "2024-06-15"}
        yield mock


class TestRefreshStatuses:
    @pytest.mark.integration
    def test_open_without_secret(self, client, refresh):
        with patch.object(cron.settings, "cron_secret", None):
            response = client.get("/api/cron/refresh-statuses")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["updated"] == 1
        refresh.assert_awaited_once()

    @pytest.mark.integration
    def test_secret_required(self, client, refresh):
        with patch.object(cron.settings, "cron_secret", "s3cret"):
            response = client.get("/api/cron/refresh-statuses")

        assert response.status_code == 401
        refresh.assert_not_awaited()

    @pytest.mark.integration
    @pytest.mark.parametrize("headers", [
        {"Authorization": "Bearer s3cret"},
        {"X-Cron-Secret": "s3cret"},
    ])
    def test_secret_accepted(self, client, refresh, headers):
        with patch.object(cron.settings, "cron_secret", "s3cret"):
            response = client.get("/api/cron/refresh-statuses", headers=headers)

        assert response.status_code == 200

    @pytest.mark.integration
    def test_job_failure(self, client, refresh):
        refresh.side_effect = Exception("database unavailable")

        with patch.object(cron.settings, "cron_secret", None):
            response = client.get("/api/cron/refresh-statuses")

        assert response.status_code == 500
        assert response.json() == {"error": "database unavailable"}

    @pytest.mark.integration
    def test_host_header_does_not_bypass_secret(self, client, refresh):
        """A remote caller claiming Host: localhost still needs the secret."""
        with patch.object(cron.settings, "cron_secret", "s3cret"):
            response = client.get("/api/cron/refresh-statuses", headers={"Host": "localhost"})

        assert response.status_code == 401
        refresh.assert_not_awaited()


def local_request(peer, headers=None):
    request = MagicMock()
    request.client.host = peer
    request.headers = headers or {}
    return request


class TestVerifyCronAuth:
    """The loopback exemption is keyed on the socket peer address."""

    @pytest.mark.integration
    @pytest.mark.parametrize("peer", ["127.0.0.1", "::1"])
    def test_loopback_peer_allowed(self, peer):
        with patch.object(cron.settings, "cron_secret", "s3cret"):
            assert cron.verify_cron_auth(local_request(peer), None, None) is True

    @pytest.mark.integration
    def test_forwarded_loopback_rejected(self):
        request = local_request("127.0.0.1", {"x-forwarded-for": "203.0.113.9"})
        with patch.object(cron.settings, "cron_secret", "s3cret"):
            assert cron.verify_cron_auth(request, None, None) is False

    @pytest.mark.integration
    def test_remote_peer_with_local_host_header_rejected(self):
        request = local_request("203.0.113.9", {"host": "localhost:8000"})
        with patch.object(cron.settings, "cron_secret", "s3cret"):
            assert cron.verify_cron_auth(request, None, None) is False
