"""Integration tests: real client against the fake affinity server."""

import json
import socket

import httpx
import pytest

from affinity_suggestions.client import SuggestionClient
from affinity_suggestions.config import SuggestionConfig
from affinity_suggestions.errors import SuggestionErrorCode
from affinity_suggestions.run import main


def make_config(base_url, api_key="test-key"):
    return SuggestionConfig(
        environment="development",
        urls={"development": base_url},
        api_key=api_key,
        timeout_seconds=5.0,
    )


def test_fetch_against_fake(fake_affinity_server, fake_affinity_module):
    with SuggestionClient(config=make_config(fake_affinity_server)) as client:
        outcome = client.fetch(1, 2)

    assert outcome.ok
    suggestions = outcome.to_dict()["data"]["suggestions"]
    assert [s["match_user_id"] for s in suggestions] == [
        r["match_user_id"] for r in fake_affinity_module.FAKE_SUGGESTIONS
    ]
    # model_version is served but not part of our shape
    assert all("model_version" not in s for s in suggestions)


def test_decision_round_trip(fake_affinity_server, fake_affinity_module):
    with SuggestionClient(config=make_config(fake_affinity_server)) as client:
        uuid = client.fetch(1, 2).unwrap().uuid
        accepted = client.interested(uuid, 1, 123, 2)
        discarded = client.not_interested(uuid, 1, 456, 2)

    assert accepted.to_dict() == {"result": True}
    assert discarded.to_dict() == {"result": True}
    assert [d["action"] for d in fake_affinity_module.RECORDED_DECISIONS] == [
        "aceptar",
        "descartar",
    ]
    assert fake_affinity_module.RECORDED_DECISIONS[0]["uuid"] == uuid


def test_missing_api_key_unauthorized(fake_affinity_server):
    with SuggestionClient(config=make_config(fake_affinity_server, api_key=None)) as client:
        client.http_client.headers.pop("x-api-key", None)
        outcome = client.fetch(1, 2)

    assert outcome.failure.error_code == SuggestionErrorCode.UNAUTHORIZED


def test_wrong_api_key_forbidden(fake_affinity_server):
    with SuggestionClient(config=make_config(fake_affinity_server, api_key="wrong")) as client:
        outcome = client.fetch(1, 2)

    assert outcome.failure.error_code == SuggestionErrorCode.FORBIDDEN


@pytest.mark.parametrize(
    "status_code,expected",
    [
        (400, SuggestionErrorCode.BAD_REQUEST),
        (404, SuggestionErrorCode.NOT_FOUND),
        (409, SuggestionErrorCode.SERVER_EXCEPTION),
        (502, SuggestionErrorCode.SERVER_ERROR),
    ],
)
def test_forced_status(fake_affinity_server, status_code, expected):
    base_url = f"{fake_affinity_server}/status/{status_code}"
    with SuggestionClient(config=make_config(base_url)) as client:
        outcome = client.interested("abc", 1, 2, 3)

    assert outcome.failure.error_code == expected


def test_unreachable_server():
    # Bind then release a port so nothing is listening on it
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    config = make_config(f"http://127.0.0.1:{port}")
    with SuggestionClient(config=config) as client:
        outcome = client.fetch(1, 2)

    assert outcome.failure.error_code == SuggestionErrorCode.CONNECTION_ERROR


def test_cli_fetch(fake_affinity_server, tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("AFFINITY_API_KEY", "test-key")
    config_path = tmp_path / "suggestion.yaml"
    config_path.write_text(
        "suggestion:\n"
        "  environment: development\n"
        "  urls:\n"
        f'    development: "{fake_affinity_server}"\n'
    )

    exit_code = main(["--config", str(config_path), "fetch", "1", "2"])

    assert exit_code == 0
    printed = json.loads(capsys.readouterr().out)
    assert len(printed["data"]["suggestions"]) == 3


def test_cli_failure_exit_code(fake_affinity_server, tmp_path, capsys):
    config_path = tmp_path / "suggestion.yaml"
    config_path.write_text(
        "suggestion:\n"
        "  environment: development\n"
        "  api_key: test-key\n"
        "  urls:\n"
        f'    development: "{fake_affinity_server}/status/503"\n'
    )

    exit_code = main(["--config", str(config_path), "accept", "abc", "1", "2", "3"])

    assert exit_code == 1
    printed = json.loads(capsys.readouterr().out)
    assert printed["error"]["code"] == "SUGGESTION_003"


def test_transport_is_httpx(fake_affinity_server):
    with SuggestionClient(config=make_config(fake_affinity_server)) as client:
        assert isinstance(client.http_client, httpx.Client)
