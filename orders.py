# -*- coding: utf-8 -*-

# Typed order requests for the order_create method, plus the argument checks
#   shared by all the endpoint methods.
# Nothing in here touches the network. Every check raises ValidationError.

from typing import NamedTuple
from typing import Any

from numbers import Real

import math

from payeer_errors import ValidationError

################################################################################
# Constants

ACTIONS = ('buy', 'sell')

TYPE_LIMIT = 'limit'
TYPE_MARKET = 'market'
TYPE_STOP_LIMIT = 'stop_limit'

################################################################################
# Argument Checks

def check_action(action):
    if action not in ACTIONS:
        raise ValidationError('Action may be only sell or buy')

    return action

# The API takes one pair or a comma separated list of them.
def check_pair(pair, required = False):
    if isinstance(pair, (list, tuple)):
        pair = ','.join(str(p).strip() for p in pair if p)

    if pair is not None and not isinstance(pair, str):
        raise ValidationError(f'Pair must be a string or a list of strings, not {type(pair).__name__}')

    pair = (pair or '').strip()

    if required and not pair:
        raise ValidationError('Pair is required')

    return pair

def check_order_id(order_id):
    if isinstance(order_id, str) and order_id.strip().isdigit():
        order_id = int(order_id)

    if isinstance(order_id, bool) or not isinstance(order_id, int):
        raise ValidationError('Order id must be an integer')

    if order_id <= 0:
        raise ValidationError('Order id must be positive')

    return order_id

# bool is an int in python, but it's not a quantity. NaN and infinity aren't either.
def check_number(name, value):
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f'{name} must be a number')

    if not math.isfinite(value):
        raise ValidationError(f'{name} must be a finite number')

    return value

def check_positive(name, value):
    if check_number(name, value) <= 0:
        raise ValidationError(f'{name} cannot be less or equal zero')

    return value

################################################################################
# Order Types

# Each order knows how to check itself and how to turn itself into POST params.
# params() always validates first, so an invalid order never makes it to the wire.

class LimitOrder(NamedTuple):
    pair : str
    action : str
    amount : Any
    price : Any

    def validate(self):
        check_action(self.action)
        check_positive('Amount', self.amount)
        check_positive('Price', self.price)

    def params(self):
        self.validate()

        return {
            'type' : TYPE_LIMIT,
            'pair' : check_pair(self.pair, required = True),
            'action' : self.action,
            'amount' : self.amount,
            'price' : self.price
        }

# Market orders are sized either by amount (base currency) or by value (quote currency), never both.
class MarketOrder(NamedTuple):
    pair : str
    action : str
    amount : Any = 0
    value : Any = 0

    def validate(self):
        check_action(self.action)
        check_number('Amount', self.amount)
        check_number('Value', self.value)

        if self.amount < 0 or self.value < 0:
            raise ValidationError('Invalid market order: amount and value cannot be negative')

        if self.amount == 0 and self.value == 0:
            raise ValidationError('Invalid market order: amount and value cannot both be zero')

        if self.amount > 0 and self.value > 0:
            raise ValidationError('Invalid market order: use only one of amount or value')

    def params(self):
        self.validate()

        params = {
            'type' : TYPE_MARKET,
            'pair' : check_pair(self.pair, required = True),
            'action' : self.action
        }

        if self.value > 0:
            params['value'] = self.value

        if self.amount > 0:
            params['amount'] = self.amount

        return params

class StopLimitOrder(NamedTuple):
    pair : str
    action : str
    amount : Any
    price : Any
    stop_price : Any

    def validate(self):
        check_action(self.action)
        check_positive('Amount', self.amount)
        check_positive('Price', self.price)
        check_positive('Stop price', self.stop_price)

    def params(self):
        self.validate()

        return {
            'type' : TYPE_STOP_LIMIT,
            'pair' : check_pair(self.pair, required = True),
            'action' : self.action,
            'amount' : self.amount,
            'price' : self.price,
            'stop_price' : self.stop_price
        }
