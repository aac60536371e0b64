"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from vinti4_gateway.client import Vinti4Client
from vinti4_gateway.config import settings


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_client() -> Vinti4Client:
    """
    Gateway client built from the current settings.

    Raises ConfigurationError (mapped to 503) when posID/posAutCode are unset.
    """
    return Vinti4Client.from_settings(settings)
