"""
Verification flows.

- installation: decides between new installation, installation update and
  rejection for lifecycle webhooks.
- request: authenticates requests of already installed clients.
- base: configuration and the public-key (signed) verification path shared
  by both flows.
"""

from .base import BaseVerifier
from .installation import InstallationVerifier
from .request import RequestVerifier

__all__ = ["BaseVerifier", "InstallationVerifier", "RequestVerifier"]
