"""HTTP executor implementations.

This package provides pluggable HTTP client implementations for the SDK,
backed by httpx (the default) or requests.
"""

from woo_trade.executors.defaults import DEFAULT_HTTP_EXECUTOR
from woo_trade.executors.httpx import HttpxHttpExecutor
from woo_trade.executors.interface import HttpExecutor, HttpResponse
from woo_trade.executors.requests import RequestsHttpExecutor

__all__ = [
    "HttpExecutor",
    "HttpResponse",
    "HttpxHttpExecutor",
    "RequestsHttpExecutor",
    "DEFAULT_HTTP_EXECUTOR",
]
