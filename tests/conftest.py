# -*- coding: utf-8 -*-

import json

import pytest

import payeer_api as api

API_ID = 'test-api-id'
SECRET_KEY = 'test-secret-key'

# 2023-11-14T22:13:20.25Z, exact in binary so the millisecond value is stable
FIXED_TIME = 1700000000.25
FIXED_TS = 1700000000250

class FakeResponse:
    def __init__(self, content, status_code = 200):
        if not isinstance(content, bytes):
            content = json.dumps(content).encode('utf-8')

        self.content = content
        self.status_code = status_code

# Stands in for requests.Session. Hands out the queued responses in order
#   (repeating the last one) and records every request made.
class RecordingSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)

        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]

        if isinstance(response, Exception):
            raise response

        if not isinstance(response, FakeResponse):
            response = FakeResponse(response)

        return response

    def bodies(self):
        return [json.loads(c['data']) for c in self.calls]

class StepClock:
    def __init__(self, start = FIXED_TIME, step = 0.001):
        self.now = start
        self.step = step

    def __call__(self):
        now = self.now
        self.now += self.step
        return now

@pytest.fixture
def auth():
    return api.Auth(API_ID, SECRET_KEY)

@pytest.fixture
def make_api(auth):
    def make(*responses, clock = lambda: FIXED_TIME, **kwargs):
        session = RecordingSession(*(responses or ({'success': True},)))
        return api.API(auth, session = session, clock = clock, **kwargs), session

    return make
