"""
Shared fixtures for the Pushbullet channel contract tests.

Run: pytest tests/test_contracts -v
"""

import pytest

from pushbullet_notification.modules.pushbullet.pipeline import PushbulletChannel

from fakes import FakeHost, ProviderStub, make_client


@pytest.fixture()
def host():
    h = FakeHost()
    h.add_user(7, "a@x.com", "Ann")
    h.opted_in.add((7, "Pushbullet.DiscussionComment"))
    return h


@pytest.fixture()
def provider():
    return ProviderStub()


@pytest.fixture()
def channel(host, provider):
    c = PushbulletChannel(host, client=make_client(provider), channel="Pushbullet", max_workers=4)
    yield c
    c.close()
