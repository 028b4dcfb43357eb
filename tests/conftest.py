"""Shared fixtures for the test suite."""

import json
from unittest import mock

import pytest
from requests.structures import CaseInsensitiveDict


def make_response(status_code=200, body=None, headers=None, text=None):
    """Build a stand-in for requests.Response."""
    response = mock.Mock()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text
    response.json.side_effect = lambda: json.loads(text)
    return response


def repo_item(full_name, repo_id=1, description="A repository"):
    owner, name = full_name.split("/", 1)
    return {
        "id": repo_id,
        "name": name,
        "full_name": full_name,
        "description": description,
        "html_url": f"https://github.com/{full_name}",
        "owner": {"login": owner},
    }


class FakeClock:
    """Clock and sleep pair that records waits instead of blocking."""

    def __init__(self, now=1_700_000_000.0):
        self.now = now
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(clock):
    from src.infrastructure.github_client import GitHubRestClient

    return GitHubRestClient(
        token="test-token",
        base_url="https://api.example.test",
        sleep=clock.sleep,
        clock=clock,
    )
