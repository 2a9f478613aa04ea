"""Service package public API definitions.

Service implementations are imported lazily so that ``app.clients`` can
depend on ``app.services.exceptions`` without triggering a circular import
through this package during application start up.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "DeviceCache",
    "PaymentLinkService",
    "PaymentService",
]

_SERVICE_MODULES = {
    "DeviceCache": "devices",
    "PaymentLinkService": "payment_links",
    "PaymentService": "payments",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .devices import DeviceCache as DeviceCache
    from .payment_links import PaymentLinkService as PaymentLinkService
    from .payments import PaymentService as PaymentService
