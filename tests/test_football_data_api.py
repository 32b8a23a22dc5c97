import pytest
import requests

from football_stats.errors import TransportError
from football_stats.football_data_api import FootballDataClient, sanitize_error_message


class FakeJSONResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON payload configured")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _client(session):
    return FootballDataClient(token="secret-token", base_url="https://api.test/v4/", timeout=5, session=session)


def test_matches_request_shape():
    session = FakeSession(FakeJSONResponse(200, {"matches": []}))

    assert _client(session).get_last_matches_finished("86", 10) == {"matches": []}

    call = session.calls[0]
    assert call["url"] == "https://api.test/v4/teams/86/matches"
    assert call["params"] == {"status": "FINISHED", "limit": 10}
    assert call["headers"] == {"X-Auth-Token": "secret-token"}
    assert call["timeout"] == 5


@pytest.mark.parametrize(
    "method, args, path, params",
    [
        ("get_competitions", (), "/competitions", None),
        ("get_standings", ("2021",), "/competitions/2021/standings", None),
        ("get_top_scorers", ("2021", 200, "2024"), "/competitions/2021/scorers", {"limit": 200, "season": "2024"}),
        ("get_player", ("44",), "/persons/44", None),
    ],
)
def test_endpoint_paths(method, args, path, params):
    session = FakeSession(FakeJSONResponse(200, {}))

    getattr(_client(session), method)(*args)

    assert session.calls[0]["url"] == "https://api.test/v4" + path
    assert session.calls[0]["params"] == params


def test_non_2xx_raises_transport_error_with_status():
    session = FakeSession(FakeJSONResponse(429, text="Too many requests, X-Auth-Token: abc123"))

    with pytest.raises(TransportError) as excinfo:
        _client(session).get_competitions()

    err = excinfo.value
    assert err.code == "HTTP_429"
    assert err.status_code == 429
    assert "abc123" not in err.details
    assert len(session.calls) == 1


def test_timeout_maps_to_timeout_code():
    session = FakeSession(error=requests.Timeout("read timed out"))

    with pytest.raises(TransportError) as excinfo:
        _client(session).get_standings("2021")

    assert excinfo.value.code == "TIMEOUT"
    assert excinfo.value.status_code is None


def test_connection_error_maps_to_network_error():
    session = FakeSession(error=requests.ConnectionError("refused"))

    with pytest.raises(TransportError) as excinfo:
        _client(session).get_competitions()

    assert excinfo.value.code == "NETWORK_ERROR"


def test_non_json_body_is_a_parse_error():
    session = FakeSession(FakeJSONResponse(200, payload=None, text="<html>"))

    with pytest.raises(TransportError) as excinfo:
        _client(session).get_competitions()

    assert excinfo.value.code == "PARSE_ERROR"


def test_sanitize_error_message():
    assert sanitize_error_message("url?apiKey=abc.def") == "url?apiKey=***"
    assert sanitize_error_message("X-Auth-Token: abc") == "X-Auth-Token: ***"
    assert sanitize_error_message(None) is None
