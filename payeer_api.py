# -*- coding: utf-8 -*-

from typing import NamedTuple
from typing import Any

# For signing requests
import hashlib
import hmac
import time
import json

# For sending requests
from requests.auth import AuthBase
import requests

from payeer_errors import PayeerError
from payeer_errors import ValidationError
from payeer_errors import APIError
from payeer_errors import TransportError

from orders import LimitOrder
from orders import MarketOrder
from orders import StopLimitOrder
from orders import check_action
from orders import check_order_id
from orders import check_pair

# For the last error lock and sys.stderr
import threading
import sys

# General constants
ENDPOINT = 'payeer.com'
PROTOCOL = 'https'
API_ROOT = 'api/trade'

# Code recorded when the server fails a request without telling us why
UNKNOWN_ERROR = 'UNKNOWN_ERROR'

# This class holds the names of the remote trade API methods.
# The name is both the last segment of the request URL and the prefix of the signed message.
class Method:
    INFO = 'info'
    TICKER = 'ticker'
    ORDERS = 'orders'
    TRADES = 'trades'
    ACCOUNT = 'account'
    ORDER_CREATE = 'order_create'
    ORDER_STATUS = 'order_status'
    ORDER_CANCEL = 'order_cancel'
    ORDERS_CANCEL = 'orders_cancel'
    MY_ORDERS = 'my_orders'
    TIME = 'time'

    ALL = frozenset([INFO, TICKER, ORDERS, TRADES, ACCOUNT, ORDER_CREATE, ORDER_STATUS,
                     ORDER_CANCEL, ORDERS_CANCEL, MY_ORDERS, TIME])

################################################################################
# Data Types

class Credentials(NamedTuple):
    api_id : str
    secret_key : str

# Contents of the 'error' object of a failed response.
# Anything besides code/description the server sent is kept in `extra` (None when built by hand).
class ErrorDetail(NamedTuple):
    code : str
    description : Any = None
    extra : Any = None

    @staticmethod
    def from_json(error):
        if not isinstance(error, dict) or not error.get('code'):
            return ErrorDetail(UNKNOWN_ERROR, None, {'error': error} if error is not None else {})

        extra = {k: v for k, v in error.items() if k not in ('code', 'description')}

        return ErrorDetail(str(error['code']), error.get('description'), extra)

class SignedRequest(NamedTuple):
    url : str
    body : bytes
    headers : dict

# Tagged result returned by API.attempt(). Exactly one of these is set.
class Result(NamedTuple):
    value : Any
    error : Any

    def ok(self):
        return self.error is None

# APIResponse Class. This class encapsulates the decoded response envelope.
# Objects of this type are returned by API.send()
class APIResponse:
    def __init__(self, content, status = None):
        self._content = content
        self._status = status

    @staticmethod
    def parse(raw, status = None):
        try:
            content = json.loads(raw)
        except ValueError as error:
            raise TransportError(f'Response is not valid JSON (status = {status})', cause = error, status = status)

        if not isinstance(content, dict):
            raise TransportError(f'Response is not a JSON object (status = {status})', status = status)

        return APIResponse(content, status)

    # Only a JSON true counts.
    @property
    def success(self):
        return self._content.get('success') is True

    @property
    def payload(self):
        return self._content if self.success else None

    @property
    def error(self):
        return None if self.success else ErrorDetail.from_json(self._content.get('error'))

    def content(self):
        return self._content

    def status(self):
        return self._status

################################################################################
# Signing

# Auth Class. This handles signing with the API id/secret pair.
# Every trade API call must be signed.
# We extend AuthBase and implement __call__ so this can also be passed directly
#   as the `auth` argument of request() calls.
class Auth(AuthBase):
    HEADER_ID   = 'API-ID'
    HEADER_SIGN = 'API-SIGN'

    def __init__(self, api_id, secret_key):
        self._credentials = Credentials(api_id, secret_key)

    @property
    def api_id(self):
        return self._credentials.api_id

    # HMAC-SHA256 of the method name followed directly by the body, in lowercase hex
    def sign(self, method, body):
        if isinstance(body, str):
            body = body.encode('utf-8')

        message = method.encode('utf-8') + (body or b'')
        key = self._credentials.secret_key.encode('utf-8')

        return hmac.new(key, message, hashlib.sha256).hexdigest()

    def headers(self, method, body):
        return {
            'Content-Type' : 'application/json',
            Auth.HEADER_ID : self._credentials.api_id,
            Auth.HEADER_SIGN : self.sign(method, body)
        }

    # 'Calling' an authentication object signs the provided prepared request.
    # The method name is the last segment of the URL path.
    def __call__(self, request):
        method = request.path_url.split('?')[0].rstrip('/').rsplit('/', 1)[-1]

        request.headers.update(self.headers(method, request.body))

        return request

################################################################################
# API

# API Class. This handles building, signing and executing requests, and unwrapping what comes back.
# It isn't meant to be shared between threads without some outside locking, although the
#   last error field is written under its own lock.
class API:
    def __init__(self, auth, endpoint = ENDPOINT, protocol = PROTOCOL, timeout = None, verbose = False, session = None, clock = time.time):
        self._request_url = f'{protocol}://{endpoint}/{API_ROOT}'
        self._verbose = verbose
        self._auth = auth

        self._session = session or requests.Session()
        self._timeout = timeout
        self._clock = clock

        self._last_error = None
        self._error_lock = threading.Lock()

        if self._verbose:
            print(f'API Endpoint: {endpoint}', file = sys.stderr)
            print(f'API Protocol: {protocol}', file = sys.stderr)

            print(f'API URL: {self._request_url}', file = sys.stderr)

    def url(self, method):
        return '{}/{}'.format(self._request_url, method)

    # Current time in whole milliseconds
    def timestamp(self):
        return int(round(self._clock() * 1000))

    def build(self, method, params = None):
        if method not in Method.ALL:
            raise ValidationError(f'Unknown API method: {method!r}')

        post = dict(params or {})

        # The timestamp is always ours, and always last.
        post.pop('ts', None)
        post['ts'] = self.timestamp()

        # Compact separators and insertion order, no key sorting.
        body = json.dumps(post, separators = (',', ':')).encode('utf-8')

        return SignedRequest(self.url(method), body, self._auth.headers(method, body))

    def send(self, signed):
        if self._verbose:
            print(f'POST: {signed.url}', file = sys.stderr)
            print(f'POST: body={signed.body.decode("utf-8")}', file = sys.stderr)

        try:
            response = self._session.request(
                method = 'POST',
                url = signed.url,
                data = signed.body,
                headers = signed.headers,
                timeout = self._timeout
            )
        except requests.RequestException as error:
            raise TransportError(f'Request to {signed.url} failed: {error}', cause = error) from error

        if self._verbose:
            print(f'POST: Status: {response.status_code}', file = sys.stderr)

        return APIResponse.parse(response.content, status = response.status_code)

    def last_error(self):
        with self._error_lock:
            return self._last_error

    def call(self, method, params = None):
        response = self.send(self.build(method, params))

        if not response.success:
            detail = response.error

            with self._error_lock:
                self._last_error = detail

            if self._verbose:
                print(f'POST: Error: {detail.code}', file = sys.stderr)

            raise APIError(detail)

        return response.payload

    # Same as call(), but failures come back in the result instead of being raised.
    def attempt(self, method, params = None):
        try:
            return Result(self.call(method, params), None)
        except PayeerError as error:
            return Result(None, error)

    def _extract(self, method, params, field):
        payload = self.call(method, params)

        if field not in payload:
            raise TransportError(f'Response to {method} has no \'{field}\' field')

        return payload[field]

    ############################################################################
    # Endpoints

    # Limits and available pairs
    def info(self, pair = None):
        params = {}

        pair = check_pair(pair)

        if pair:
            params['pair'] = pair

        return self.call(Method.INFO, params)

    # Price statistics for the last 24 hours
    def ticker(self, pair = None):
        params = {}

        pair = check_pair(pair)

        if pair:
            params['pair'] = pair

        return self._extract(Method.TICKER, params, 'pairs')

    def orders(self, pair):
        return self._extract(Method.ORDERS, {'pair': check_pair(pair, required = True)}, 'pairs')

    def trades(self, pair):
        return self._extract(Method.TRADES, {'pair': check_pair(pair, required = True)}, 'pairs')

    # Wallet balances
    def account(self):
        return self._extract(Method.ACCOUNT, {}, 'balances')

    def order_status(self, order_id):
        return self._extract(Method.ORDER_STATUS, {'order_id': check_order_id(order_id)}, 'order')

    # Server time, milliseconds
    def time(self):
        return self._extract(Method.TIME, {}, 'time')

    def order_create(self, order):
        return self.call(Method.ORDER_CREATE, order.params())

    def limit_order(self, pair, action, amount, price):
        return self.order_create(LimitOrder(pair, action, amount, price))

    def market_order(self, pair, action, amount = 0, value = 0):
        return self.order_create(MarketOrder(pair, action, amount, value))

    def stop_limit_order(self, pair, action, amount, price, stop_price):
        return self.order_create(StopLimitOrder(pair, action, amount, price, stop_price))

    def cancel_order(self, order_id):
        return self._extract(Method.ORDER_CANCEL, {'order_id': check_order_id(order_id)}, 'success')

    def cancel_orders(self, pair = None, action = None):
        return self._extract(Method.ORDERS_CANCEL, self._filter_params(pair, action), 'items')

    def my_orders(self, pair = None, action = None):
        return self._extract(Method.MY_ORDERS, self._filter_params(pair, action), 'items')

    # Optional pair/action filter shared by cancel_orders() and my_orders()
    @staticmethod
    def _filter_params(pair, action):
        if action:
            action = check_action(action)

        params = {}

        pair = check_pair(pair)

        if pair:
            params['pair'] = pair

        if action:
            params['action'] = action

        return params
