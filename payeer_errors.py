# -*- coding: utf-8 -*-

# Error types raised by the trade API client.
# There are three kinds a caller needs to tell apart:
# - ValidationError: bad arguments, nothing was sent
# - APIError: the server answered and said no
# - TransportError: we couldn't talk to the server, or couldn't understand it

# Base class for everything the client raises.
class PayeerError(Exception):
    pass

# Raised locally, before any request is made.
# Also a ValueError, since that's what it is.
class ValidationError(PayeerError, ValueError):
    pass

# The server responded with success != true. The error detail travels with the exception.
class APIError(PayeerError):
    def __init__(self, detail):
        super().__init__(detail.code)
        self.detail = detail

    @property
    def code(self):
        return self.detail.code

    @property
    def description(self):
        return self.detail.description

    def __str__(self):
        if self.detail.description:
            return f'{self.detail.code}: {self.detail.description}'

        return self.detail.code

# Network failure, timeout, or a body that isn't the envelope we expect.
# `cause` is the underlying exception (if any), `status` the HTTP status (if we got that far).
class TransportError(PayeerError):
    def __init__(self, message, cause = None, status = None):
        super().__init__(message)
        self.cause = cause
        self.status = status
