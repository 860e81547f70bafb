"""
Request reader contract.
"""

from typing import Protocol


class RequestReader(Protocol):
    """
    Used by the verifiers to obtain information about an HTTP request.
    Implement it to adapt the library to any HTTP framework.
    """

    def extract_connect_jwt(self) -> str:
        """
        Return the JWT from the `Authorization` header or the deprecated `jwt`
        query parameter, or an empty string when there is none.
        """
        ...

    def extract_client_key(self) -> str:
        """Return the installation identifier claimed in the request body."""
        ...

    def compute_query_string_hash(self, base_url: str) -> str:
        """Return the Query String Hash of the request relative to base_url."""
        ...
