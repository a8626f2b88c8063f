import json

import pytest
import requests

from otpclient import OTPConnection

BASE = "http://localhost:8080/otp"


class FakeResponse:
    """Just enough of requests.Response for the client code."""

    def __init__(self, status_code=200, body=b"", url=None):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.status_code = status_code
        self.content = body
        self.url = url

    @property
    def text(self):
        return self.content.decode("utf-8")

    def json(self):
        return json.loads(self.text)

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeOTP:
    """Routes (method, url) to canned responses and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, url, response):
        self.routes[(method, url)] = response

    def _handle(self, method, url, params=None, **kwargs):
        self.calls.append((method, url, params))
        try:
            response = self.routes[(method, url)]
        except KeyError:
            raise requests.exceptions.ConnectionError(f"no route for {method} {url}")
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, params=None, **kwargs):
        return self._handle("GET", url, params, **kwargs)

    def post(self, url, params=None, **kwargs):
        return self._handle("POST", url, params, **kwargs)

    def methods(self):
        return [(method, url) for method, url, _ in self.calls]


@pytest.fixture
def fake_otp(monkeypatch):
    server = FakeOTP()
    monkeypatch.setattr(requests, "get", server.get)
    monkeypatch.setattr(requests, "post", server.post)
    return server


@pytest.fixture
def otpcon():
    return OTPConnection(hostname="localhost", router="default", port=8080, version=1)
