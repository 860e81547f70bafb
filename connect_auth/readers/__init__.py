"""
Request readers adapt an HTTP request of any framework to what the
verifiers need: the raw JWT, the claimed client key and the request QSH.
"""

from .base import RequestReader
from .http_reader import HttpRequestReader

__all__ = ["RequestReader", "HttpRequestReader"]
