"""Shared fixtures: a clock that advances on every call, and contact builders."""

from datetime import datetime, timedelta, timezone

import pytest

from phonebook.domain import Contact


class TickingClock:
    """Returns a strictly increasing UTC time, one step per call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime.now(timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        self.now += self.step
        return self.now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


def make_contact(
    first_name: str = "John",
    last_name: str = "Doe",
    phone_number: str = "1234567890",
    **kwargs,
) -> Contact:
    return Contact(
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        **kwargs,
    )
