"""Tests for the Apps Script web app client."""

import json

import pytest
import requests

import remote
from errors import ConfigurationError, RemoteError
from utils import PLACEHOLDER_URL


def test_fetch_records_returns_list(monkeypatch, fake_response, web_app_url):
    calls = []

    def fake_get(url, timeout=None, allow_redirects=True):
        calls.append((url, timeout, allow_redirects))
        return fake_response([{"type": "math"}])

    monkeypatch.setattr(remote.requests, "get", fake_get)

    assert remote.fetch_records(web_app_url, timeout=5) == [{"type": "math"}]
    assert calls == [(web_app_url, 5, True)]


def test_fetch_records_non_array_is_configuration_error(monkeypatch, fake_response, web_app_url):
    monkeypatch.setattr(remote.requests, "get", lambda *a, **k: fake_response({"error": "no sheet"}))

    with pytest.raises(ConfigurationError, match="Google Apps Script 설정을 확인하세요"):
        remote.fetch_records(web_app_url)


def test_fetch_records_http_error(monkeypatch, fake_response, web_app_url):
    monkeypatch.setattr(remote.requests, "get", lambda *a, **k: fake_response(None, status_code=500))

    with pytest.raises(RemoteError, match="status: 500"):
        remote.fetch_records(web_app_url)


def test_fetch_records_invalid_json(monkeypatch, fake_response, web_app_url):
    monkeypatch.setattr(remote.requests, "get", lambda *a, **k: fake_response(json_error=True))

    with pytest.raises(RemoteError):
        remote.fetch_records(web_app_url)


def test_fetch_records_transport_failure(monkeypatch, web_app_url):
    def boom(*_args, **_kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(remote.requests, "get", boom)

    with pytest.raises(RemoteError):
        remote.fetch_records(web_app_url)


@pytest.mark.parametrize("url", [None, "", "   ", PLACEHOLDER_URL])
def test_unset_url_rejected_before_request(monkeypatch, url):
    def should_not_be_called(*_args, **_kwargs):
        raise AssertionError("request sent")

    monkeypatch.setattr(remote.requests, "get", should_not_be_called)
    monkeypatch.setattr(remote.requests, "post", should_not_be_called)

    with pytest.raises(ConfigurationError):
        remote.fetch_records(url)
    with pytest.raises(ConfigurationError):
        remote.submit_record(url, {"type": "math"})


def test_submit_record_posts_json_text_body(monkeypatch, fake_response, web_app_url):
    sent = {}

    def fake_post(url, data=None, headers=None, timeout=None, allow_redirects=True):
        sent.update(url=url, data=data, headers=headers, timeout=timeout)
        return fake_response(None)

    monkeypatch.setattr(remote.requests, "post", fake_post)
    payload = {"type": "math", "date": "2024-03-05", "content": "셰이더", "mood": "높음", "reaction": "어려움"}

    assert remote.submit_record(web_app_url, payload) is None
    assert sent["url"] == web_app_url
    assert sent["headers"]["Content-Type"].startswith("text/plain")
    assert json.loads(sent["data"].decode("utf-8")) == payload


def test_submit_record_ignores_http_status(monkeypatch, fake_response, web_app_url):
    monkeypatch.setattr(remote.requests, "post", lambda *a, **k: fake_response(None, status_code=500))

    remote.submit_record(web_app_url, {"type": "etc"})


def test_submit_record_transport_failure(monkeypatch, web_app_url):
    def boom(*_args, **_kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(remote.requests, "post", boom)

    with pytest.raises(RemoteError):
        remote.submit_record(web_app_url, {"type": "etc"})


@pytest.mark.parametrize("bad_item", [None, "row", 3, ["nested"]])
def test_fetch_records_rejects_non_object_items(monkeypatch, fake_response, web_app_url, bad_item):
    monkeypatch.setattr(remote.requests, "get", lambda *a, **k: fake_response([{"type": "math"}, bad_item]))

    with pytest.raises(ConfigurationError):
        remote.fetch_records(web_app_url)
