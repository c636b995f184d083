"""Backend transport layer — Blocking HTTP access to the search backend.

Built-in transports:
  - vespa: Vespa Document v1 and Query APIs over httpx

Implement ``TransportClient`` to target another backend.
"""

from vespabridge.transport.base import TransportClient
from vespabridge.transport.vespa import VespaTransport

__all__ = ["TransportClient", "VespaTransport"]
