"""
Test helpers and constants for connect_auth tests.
"""

BASE_URL = "https://test.example.com"
CLIENT_KEY = "jira-client-key"
SHARED_SECRET = "shh-secret-cat-0123456789abcdef0123456789"
OTHER_SHARED_SECRET = "invalid-shared-secret-0123456789abcdef0123"
KID = "kid"
STORED_ENTITY = {"app_specific_id": 1}


class StaticRequestReader:
    """Request reader returning fixed values."""

    def __init__(self, jwt: str = "", client_key: str = CLIENT_KEY, qsh: str = ""):
        self.jwt = jwt
        self.client_key = client_key
        self.qsh = qsh
        self.qsh_computations = 0

    def extract_connect_jwt(self) -> str:
        return self.jwt

    def extract_client_key(self) -> str:
        return self.client_key

    def compute_query_string_hash(self, base_url: str) -> str:
        self.qsh_computations += 1
        return self.qsh
