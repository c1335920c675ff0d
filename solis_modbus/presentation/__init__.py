"""Presentation layer: dependency wiring and the session client."""

from .client import SolisInverterClient
from .container import DIContainer, create_container

__all__ = ["DIContainer", "SolisInverterClient", "create_container"]
