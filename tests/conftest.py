"""Shared fixtures: fake clock, sample TDX payloads, mock HTTP transport."""

import json
import os
import time

import httpx
import pytest
import structlog

SAMPLE_SUMMARY = "Some notes here.\r\nReviewed by:  J. Smith/IT-SA\r\nDate: 01/02/2023 extra"


class FakeClock:
    """Monotonic clock whose sleep() just moves time forward"""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float):
        self.now += seconds


def make_attributes(**overrides):
    """Default attribute list; pass name=None to drop an attribute"""
    values = {
        "Vendor": ("ValueText", "Zoom Video"),
        "Renewal": ("ValueText", "Yes"),
        "Software Type": ("ValueText", "Web Application - Internal"),
        "Information Classification Standard": ("ValueText", "Level 2 - Confidential"),
        "Number of Students": ("Value", "3"),
        "Number of Staff": ("Value", "2"),
        "Number of Others": ("Value", "0"),
        "Technology Coordinator": ("ValueText", "Jane Doe (jdoe)"),
        "DoIT Security Classification": ("ValueText", "Medium Risk"),
        "DoIT Security SME Summary": ("ValueText", SAMPLE_SUMMARY),
    }
    for key, value in overrides.items():
        name = key.replace("_", " ")
        if value is None:
            values.pop(name, None)
        else:
            values[name] = (values.get(name, ("ValueText",))[0], value)

    attributes = []
    for index, (name, (field, value)) in enumerate(values.items(), start=1):
        attr = {"ID": 1000 + index, "Name": name, "Value": None, "ValueText": None}
        attr[field] = value
        attributes.append(attr)
    return attributes


def make_ticket(ticket_id: int = 12345678, attributes=None, **fields) -> dict:
    ticket = {
        "ID": ticket_id,
        "CreatedDate": "2023-01-05T15:22:10Z",
        "StatusName": "In Review",
        "Title": "Zoom Workplace",
        "RequestorName": "Pat Lee",
        "Attributes": make_attributes() if attributes is None else attributes,
        "Tasks": [
            {"Title": "PCR Intake", "PercentComplete": 100},
            {"Title": "PCR Security", "PercentComplete": 40},
        ],
    }
    ticket.update(fields)
    return ticket


class RecordingTransport(httpx.MockTransport):
    """MockTransport serving canned tickets and recording every request"""

    def __init__(self, tickets: dict = None, status_code: int = 200):
        self.tickets = tickets or {}
        self.status_code = status_code
        self.requests = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code)

        path = request.url.path
        if request.method == "POST" and path.endswith("/tickets/search"):
            query = json.loads(request.content)
            return httpx.Response(200, json=[{"ID": 1, "Title": query.get("SearchText")}])
        if path.endswith("/feed"):
            return httpx.Response(200, json=[{"Body": "Status changed"}])

        ticket_id = path.rsplit("/", 1)[-1]
        if ticket_id in self.tickets:
            return httpx.Response(200, json=self.tickets[ticket_id])
        return httpx.Response(404)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def local_timezone():
    """Pin the process timezone to UTC; call the fixture to switch zones"""
    if not hasattr(time, "tzset"):
        yield lambda name: pytest.skip("time.tzset is not available")
        return

    original = os.environ.get("TZ")

    def set_zone(name: str):
        os.environ["TZ"] = name
        time.tzset()

    set_zone("UTC")
    yield set_zone

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def raw_ticket():
    return make_ticket()
