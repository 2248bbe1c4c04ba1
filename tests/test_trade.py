# -*- coding: utf-8 -*-

import json

import pandas
import pytest
import requests

import trade

from conftest import FakeResponse
from conftest import RecordingSession

@pytest.fixture
def auth_arg(tmp_path):
    path = tmp_path / 'payeer.cred'
    path.write_text(json.dumps({'api_id': 'id-1', 'secret_key': 'secret'}))

    return f'--auth-file={path}'

def test_ticker_prints_json(auth_arg, capsys):
    session = RecordingSession({'success': True, 'pairs': {'BTC_USDT': {'last': '30000'}}})

    assert trade.main(['ticker', '--pair=BTC_USDT', auth_arg], session = session) == trade.EXIT_OK

    assert json.loads(capsys.readouterr().out) == {'BTC_USDT': {'last': '30000'}}
    assert session.calls[0]['url'] == 'https://payeer.com/api/trade/ticker'
    assert json.loads(session.calls[0]['data'])['pair'] == 'BTC_USDT'
    assert session.calls[0]['headers']['API-ID'] == 'id-1'

def test_account_prints_table(auth_arg, capsys):
    session = RecordingSession({'success': True, 'balances': {
        'BTC': {'total': 1, 'available': 0.5, 'hold': 0.5},
        'USDT': {'total': 10, 'available': 10, 'hold': 0}
    }})

    assert trade.main(['account', '--table', auth_arg], session = session) == trade.EXIT_OK

    out = capsys.readouterr().out

    assert 'BTC' in out and 'USDT' in out and 'available' in out

def test_limit_order_options(auth_arg, capsys):
    session = RecordingSession({'success': True, 'order_id': 3})

    args = ['limit-order', '--pair=BTC_USDT', '--action=BUY', '--amount=0.5', '--price=20000', auth_arg]

    assert trade.main(args, session = session) == trade.EXIT_OK
    assert session.bodies()[0] == {
        'type': 'limit',
        'pair': 'BTC_USDT',
        'action': 'buy',
        'amount': 0.5,
        'price': 20000.0,
        'ts': session.bodies()[0]['ts']
    }

def test_validation_error_exit_code(auth_arg, capsys):
    session = RecordingSession({'success': True})

    args = ['market-order', '--pair=BTC_USDT', '--action=buy', '--amount=1', '--value=1', auth_arg]

    assert trade.main(args, session = session) == trade.EXIT_INVALID
    assert session.calls == []
    assert 'use only one of amount or value' in capsys.readouterr().err

def test_api_error_exit_code(auth_arg, capsys):
    session = RecordingSession({'success': False, 'error': {'code': 'INVALID_SIGN'}})

    assert trade.main(['account', auth_arg], session = session) == trade.EXIT_API
    assert 'INVALID_SIGN' in capsys.readouterr().err

def test_transport_error_exit_code(auth_arg, capsys):
    session = RecordingSession(requests.ConnectionError('down'))

    assert trade.main(['time', auth_arg], session = session) == trade.EXIT_TRANSPORT

def test_bad_body_is_transport_error(auth_arg):
    session = RecordingSession(FakeResponse(b'<html></html>', status_code = 500))

    assert trade.main(['time', auth_arg], session = session) == trade.EXIT_TRANSPORT

@pytest.mark.parametrize('args', [[], ['withdraw'], ['ticker', 'account']])
def test_bad_command_shows_usage(auth_arg, capsys, args):
    assert trade.main(args + [auth_arg], session = RecordingSession({'success': True})) == trade.EXIT_INVALID
    assert 'Usage:' in capsys.readouterr().err

def test_make_table_shapes():
    by_key = trade.make_table({'BTC_USDT': {'ask': 1}, 'ETH_USDT': {'ask': 2}})
    rows = trade.make_table([{'id': 1}, {'id': 2}])
    items = trade.make_table([5, 6])

    assert isinstance(by_key, pandas.DataFrame)
    assert list(by_key.index) == ['BTC_USDT', 'ETH_USDT']
    assert list(rows['id']) == [1, 2]
    assert list(items['item']) == [5, 6]

    assert trade.make_table(True) is None
    assert trade.make_table({}) is None
    assert trade.make_table({'BTC_USDT': 12}) is None

def test_table_falls_back_to_json(auth_arg, capsys):
    session = RecordingSession({'success': True, 'time': 1700000000000})

    assert trade.main(['time', '--table', auth_arg], session = session) == trade.EXIT_OK

    captured = capsys.readouterr()

    assert json.loads(captured.out) == 1700000000000
    assert 'Warning:' in captured.err

@pytest.mark.parametrize('number', ['--price=inf', '--price=nan'])
def test_non_finite_numbers_never_sent(auth_arg, capsys, number):
    session = RecordingSession({'success': True, 'order_id': 3})

    args = ['limit-order', '--pair=BTC_USDT', '--action=buy', '--amount=1', number, auth_arg]

    assert trade.main(args, session = session) == trade.EXIT_INVALID
    assert session.calls == []
    assert 'finite' in capsys.readouterr().err
