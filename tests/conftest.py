"""Shared fixtures: an in-memory stand-in for slack_sdk.WebClient."""

import pytest
from slack_sdk.errors import SlackApiError


class FakeResponse(dict):
    def __init__(self, data, headers=None):
        super().__init__(data)
        self.headers = headers or {}


def _api_error(error):
    return SlackApiError(f"The request failed: {error}", {"ok": False, "error": error})


class FakeSlackClient:
    def __init__(self, token="xoxb-test", scopes="chat:write,im:write,users:read"):
        self.token = token
        self.scopes = scopes
        self.invalid_token = False
        self.unknown_users = set()
        self.dm_disabled = set()
        self.calls = []
        self.sent = []

    def auth_test(self):
        self.calls.append(("auth_test",))
        if self.invalid_token:
            raise _api_error("invalid_auth")
        headers = {"X-OAuth-Scopes": self.scopes} if self.scopes is not None else {}
        return FakeResponse({"ok": True, "user_id": "UBOT", "team": "North Pole"}, headers)

    def users_info(self, user):
        self.calls.append(("users_info", user))
        if user in self.unknown_users:
            raise _api_error("user_not_found")
        return FakeResponse({"ok": True, "user": {"id": user, "name": user.lower(), "real_name": f"Elf {user}"}})

    def conversations_open(self, users):
        self.calls.append(("conversations_open", tuple(users)))
        return FakeResponse({"ok": True, "channel": {"id": f"D{users[0]}"}})

    def chat_postMessage(self, channel, text, **kwargs):
        self.calls.append(("chat_postMessage", channel))
        if channel[1:] in self.dm_disabled:
            raise _api_error("cannot_dm_bot")
        self.sent.append((channel, text))
        return FakeResponse({"ok": True, "channel": channel})


@pytest.fixture
def slack():
    return FakeSlackClient()


@pytest.fixture
def client_factory(slack):
    def factory(token):
        slack.token = token
        return slack
    return factory
