#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# This file implements a command line tool to call the Payeer trade API.
# Pass the command first, then any options it needs:
#
#   ./trade.py ticker --pair=BTC_USDT --table
#   ./trade.py limit-order --pair=BTC_USDT --action=buy --amount=0.001 --price=20000
#   ./trade.py my-orders --action=sell -v
#
# You are expected to put a JSON file with your API id and secret somewhere and pass it
#   with the argument --auth-file=<file> (it defaults to payeer.cred in the current directory).
# Results are printed to stdout as JSON, or as a table with --table.
# Exit status is 1 for bad arguments, 2 if the API refused the call and 3 if we couldn't reach it.

from opts import read_string_option
from opts import read_number_option
from opts import make_auth

from payeer_errors import ValidationError
from payeer_errors import APIError
from payeer_errors import TransportError

import payeer_api as api

import pandas
import json
import sys

################################################################################
# Constants/Globals

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_API = 2
EXIT_TRANSPORT = 3

v = False

################################################################################
# Commands

def read_call_options(args):
    return {
        'pair' : read_string_option(args, '--pair=', lowercase = False),
        'action' : read_string_option(args, '--action='),
        'amount' : read_number_option(args, '--amount='),
        'value' : read_number_option(args, '--value='),
        'price' : read_number_option(args, '--price='),
        'stop_price' : read_number_option(args, '--stop-price='),
        'order_id' : read_number_option(args, '--order-id=', kind = int)
    }

# Command name -> how to call it with the parsed options
COMMANDS = {
    'info' : lambda a, o: a.info(o['pair']),
    'ticker' : lambda a, o: a.ticker(o['pair']),
    'orders' : lambda a, o: a.orders(o['pair']),
    'trades' : lambda a, o: a.trades(o['pair']),
    'account' : lambda a, o: a.account(),
    'order-status' : lambda a, o: a.order_status(o['order_id']),
    'time' : lambda a, o: a.time(),
    'limit-order' : lambda a, o: a.limit_order(o['pair'], o['action'], o['amount'], o['price']),
    'market-order' : lambda a, o: a.market_order(o['pair'], o['action'], o['amount'] or 0, o['value'] or 0),
    'stop-limit-order' : lambda a, o: a.stop_limit_order(o['pair'], o['action'], o['amount'], o['price'], o['stop_price']),
    'cancel-order' : lambda a, o: a.cancel_order(o['order_id']),
    'cancel-orders' : lambda a, o: a.cancel_orders(o['pair'], o['action']),
    'my-orders' : lambda a, o: a.my_orders(o['pair'], o['action'])
}

################################################################################
# Output

# Turn a result into a table if it has a sensible shape for one:
#   mappings of mappings (pairs, balances, orders by id) get one row per key,
#   lists get one row per entry.
# Returns None for anything else.
def make_table(result):
    if isinstance(result, dict) and result and all(isinstance(r, dict) for r in result.values()):
        return pandas.DataFrame.from_dict(result, orient = 'index')

    if isinstance(result, list) and result:
        if all(isinstance(r, dict) for r in result):
            return pandas.DataFrame(result)

        return pandas.DataFrame({'item': result})

    return None

def print_result(result, as_table):
    if as_table:
        table = make_table(result)

        if table is not None:
            print(table.to_string())
            return

        print('Warning: Result doesn\'t fit in a table, printing JSON instead...', file = sys.stderr)

    print(json.dumps(result, indent = 4, sort_keys = True))

def usage():
    print(f'Usage: trade.py <command> [--auth-file=<file>] [--pair=] [--action=] [--amount=] [--value=] [--price=] [--stop-price=] [--order-id=] [--table] [-v]', file = sys.stderr)
    print(f'Commands: {", ".join(COMMANDS)}', file = sys.stderr)

################################################################################
# Main Function

def main(argv = None, session = None):
    args = sys.argv[1:] if argv is None else argv

    # I only want to access this here.
    globals()['v'] = '-v' in args

    commands = [s for s in args if not s.startswith('-')]

    if len(commands) != 1 or commands[0] not in COMMANDS:
        usage()
        return EXIT_INVALID

    command = commands[0]
    options = read_call_options(args)

    # Load credentials from file
    auth = make_auth(args, verbose = v)

    try:
        payeer = api.API(auth, verbose = v, session = session)

        result = COMMANDS[command](payeer, options)
    except ValidationError as error:
        print(f'Error: {error}', file = sys.stderr)
        return EXIT_INVALID
    except APIError as error:
        print('API Error!', file = sys.stderr)
        print(f'Error info: {error}', file = sys.stderr)
        return EXIT_API
    except TransportError as error:
        print('Failed to reach the API!', file = sys.stderr)
        print(f'Error info: {error}', file = sys.stderr)
        return EXIT_TRANSPORT

    print_result(result, '--table' in args)

    return EXIT_OK

if __name__ == "__main__":
    sys.exit(main())
