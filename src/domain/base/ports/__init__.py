"""Domain ports for infrastructure concerns."""

from .remote_client_port import Page, RawPayload, RemoteClientPort

__all__ = [
    "Page",
    "RawPayload",
    "RemoteClientPort",
]
