"""
Test doubles for the Pushbullet channel contract tests.

Everything here is in-process: a dict-backed HostProvider and an
httpx.MockTransport standing in for api.pushbullet.com. No network.
"""

from typing import Optional

import httpx

from pushbullet_notification.core.interfaces.host import ActivityEvent, HostProvider, Recipient
from pushbullet_notification.modules.pushbullet.client import PushbulletClient
from pushbullet_notification.modules.pushbullet.errors import RecipientNotFound

API_URL = "https://api.pushbullet.com/v2/pushes"
BASE_URL = "https://forum.example.com"


class FakeHost(HostProvider):
    """Dict-backed host. Records every preference lookup for assertions."""

    def __init__(self, token: Optional[str] = "o.test-token"):
        self.token = token
        self.users: dict[int, Recipient] = {}
        self.opted_in: set[tuple[int, str]] = set()
        self.permissions: set[tuple[int, str]] = set()
        self.definitions: list[tuple[str, str, str]] = []
        self.preference_calls: list[tuple[int, str]] = []

    def add_user(self, user_id: int, email: Optional[str], name: str = None) -> Recipient:
        recipient = Recipient(user_id=user_id, email=email, name=name)
        self.users[user_id] = recipient
        return recipient

    def lookup_user(self, user_id: int) -> Recipient:
        if user_id not in self.users:
            raise RecipientNotFound(user_id)
        return self.users[user_id]

    def preference_definitions(self) -> list[tuple[str, str, str]]:
        return list(self.definitions)

    def user_opted_in(self, user_id: int, preference_key: str) -> bool:
        self.preference_calls.append((user_id, preference_key))
        return (user_id, preference_key) in self.opted_in

    def canonical_url(self, route: str) -> str:
        return f"{BASE_URL}/{route.lstrip('/')}"

    def credential(self) -> Optional[str]:
        return self.token

    def has_permission(self, user_id: int, permission: str) -> bool:
        return (user_id, permission) in self.permissions


class ProviderStub:
    """MockTransport handler: answers with a fixed status and records requests."""

    def __init__(self, status_code: int = 200, json_body: dict = None, exc: Exception = None):
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else {"active": True}
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.json_body)


def make_client(stub: ProviderStub, retry_transport_errors: bool = True) -> PushbulletClient:
    http = httpx.Client(transport=httpx.MockTransport(stub))
    return PushbulletClient(
        api_url=API_URL,
        retry_transport_errors=retry_transport_errors,
        http_client=http,
    )


def make_event(**overrides) -> ActivityEvent:
    values = dict(
        activity_id=1,
        notify_user_id=7,
        activity_type="DiscussionComment",
        headline_format="{User} replied to {Discussion}",
        route="/discussion/5",
        fields={"User": "Ann", "Discussion": "Bug"},
    )
    values.update(overrides)
    return ActivityEvent(**values)

