"""Infrastructure decorators for cross-cutting concerns."""

from .connection_decorator import require_connection
from .error_handler import handle_transport_errors

__all__ = ["handle_transport_errors", "require_connection"]
