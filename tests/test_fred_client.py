"""Tests for the FRED API client."""

from datetime import date
from types import SimpleNamespace

import httpx
import pytest

from macro_dashboard.config import Settings
from macro_dashboard.data import fred_client
from macro_dashboard.data.fred_client import FredClient
from macro_dashboard.errors import FetchError
from macro_dashboard.models import Observation


SAMPLE_RESPONSE = {
    "realtime_start": "2024-01-10",
    "realtime_end": "2024-01-10",
    "observation_start": "2024-01-02",
    "observation_end": "2024-01-05",
    "units": "lin",
    "count": 4,
    "observations": [
        {"realtime_start": "2024-01-10", "realtime_end": "2024-01-10", "date": "2024-01-02", "value": "3.95"},
        {"realtime_start": "2024-01-10", "realtime_end": "2024-01-10", "date": "2024-01-03", "value": "3.91"},
        {"realtime_start": "2024-01-10", "realtime_end": "2024-01-10", "date": "2024-01-04", "value": "."},
        {"realtime_start": "2024-01-10", "realtime_end": "2024-01-10", "date": "2024-01-05", "value": "4.05"},
    ],
}


def make_client(settings, handler) -> FredClient:
    return FredClient(settings, transport=httpx.MockTransport(handler))


class TestFredClient:
    def test_parses_observations_and_drops_missing(self, settings):
        with make_client(settings, lambda request: httpx.Response(200, json=SAMPLE_RESPONSE)) as client:
            data = client.fetch_observations("DGS10", date(2024, 1, 2), date(2024, 1, 5))

        assert data == [
            Observation(date(2024, 1, 2), 3.95),
            Observation(date(2024, 1, 3), 3.91),
            Observation(date(2024, 1, 5), 4.05),
        ]

    def test_request_parameters(self, settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"observations": []})

        with make_client(settings, handler) as client:
            client.fetch_observations("DGS10", date(2024, 1, 2), date(2024, 1, 5))

        params = seen[0].url.params
        assert seen[0].url.path.endswith("/series/observations")
        assert params["series_id"] == "DGS10"
        assert params["api_key"] == "test_key"
        assert params["file_type"] == "json"
        assert params["observation_start"] == "2024-01-02"
        assert params["observation_end"] == "2024-01-05"

    def test_open_ended_request(self, settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"observations": []})

        with make_client(settings, handler) as client:
            assert client.fetch_observations("DGS10", date(2024, 1, 2)) == []

        assert "observation_end" not in seen[0].url.params

    def test_http_error_raises_fetch_error(self, settings):
        with make_client(settings, lambda request: httpx.Response(500)) as client:
            with pytest.raises(FetchError, match="500"):
                client.fetch_observations("DGS10", date(2024, 1, 2))

    def test_malformed_json_raises_fetch_error(self, settings):
        with make_client(settings, lambda request: httpx.Response(200, content=b"<html>")) as client:
            with pytest.raises(FetchError, match="Malformed"):
                client.fetch_observations("DGS10", date(2024, 1, 2))

    def test_payload_without_observations_raises(self, settings):
        body = {"error_code": 400, "error_message": "Bad Request."}
        with make_client(settings, lambda request: httpx.Response(200, json=body)) as client:
            with pytest.raises(FetchError, match="no observations"):
                client.fetch_observations("DGS10", date(2024, 1, 2))

    def test_transport_error_raises_fetch_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(settings, handler) as client:
            with pytest.raises(FetchError, match="failed"):
                client.fetch_observations("DGS10", date(2024, 1, 2))

    def test_requires_api_key(self, tmp_path):
        with pytest.raises(ValueError, match="FRED_API_KEY not set"):
            FredClient(Settings(fred_api_key="", data_dir=tmp_path))


class TestRateLimit:
    def test_consecutive_requests_are_spaced(self, tmp_path, monkeypatch):
        sleeps = []
        fake_time = SimpleNamespace(monotonic=lambda: 100.0, sleep=sleeps.append)
        monkeypatch.setattr(fred_client, "time", fake_time)

        settings = Settings(fred_api_key="test_key", data_dir=tmp_path, rate_limit_delay=0.5)
        handler = lambda request: httpx.Response(200, json={"observations": []})  # noqa: E731

        with make_client(settings, handler) as client:
            client.fetch_observations("DGS2", date(2024, 1, 2))
            client.fetch_observations("DGS10", date(2024, 1, 2))

        assert sleeps == [0.5]

    def test_limiter_state_is_per_instance(self, tmp_path, monkeypatch):
        sleeps = []
        fake_time = SimpleNamespace(monotonic=lambda: 100.0, sleep=sleeps.append)
        monkeypatch.setattr(fred_client, "time", fake_time)

        settings = Settings(fred_api_key="test_key", data_dir=tmp_path, rate_limit_delay=0.5)
        handler = lambda request: httpx.Response(200, json={"observations": []})  # noqa: E731

        for _ in range(2):
            with make_client(settings, handler) as client:
                client.fetch_observations("DGS2", date(2024, 1, 2))

        assert sleeps == []
