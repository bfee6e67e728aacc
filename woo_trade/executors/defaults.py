"""Default executor configuration.

This module defines the HTTP executor implementation used by the SDK when no
custom executor is provided.
"""

from typing import Type

from woo_trade.executors.httpx import HttpxHttpExecutor
from woo_trade.executors.interface import HttpExecutor

DEFAULT_HTTP_EXECUTOR: Type[HttpExecutor] = HttpxHttpExecutor
