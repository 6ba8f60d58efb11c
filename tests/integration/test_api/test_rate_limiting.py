"""Test rate limiting functionality."""
import pytest

from rangevote.core.security import generate_share_token


@pytest.mark.integration
@pytest.mark.rate_limit
class TestRateLimiting:
    """Test rate limiting on the anonymous share link lookup."""

    def test_share_link_lookup_rate_limit(self, client):
        """Lookups are limited to 30 per minute per client."""
        for i in range(30):
            response = client.get(f"/api/v1/share-links/{generate_share_token()}")
            assert response.status_code == 404, f"Request {i+1} should pass the limiter"

        response = client.get(f"/api/v1/share-links/{generate_share_token()}")
        assert response.status_code == 429

    def test_limit_is_per_client_ip(self, client):
        for _ in range(30):
            client.get(f"/api/v1/share-links/{generate_share_token()}", headers={"X-Forwarded-For": "10.0.0.1"})

        blocked = client.get(f"/api/v1/share-links/{generate_share_token()}", headers={"X-Forwarded-For": "10.0.0.1"})
        other = client.get(f"/api/v1/share-links/{generate_share_token()}", headers={"X-Forwarded-For": "10.0.0.2"})

        assert blocked.status_code == 429
        assert other.status_code == 404
