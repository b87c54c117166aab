"""User-facing vault operations.

Exposes :class:`VaultService`, which runs deposit, withdraw and transfer as
one atomic transition per index, harvesting pool yield before any ratio is
read.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .service import VaultService

__all__ = ["VaultService"]


def __getattr__(name):  # pragma: no cover - lightweight lazy import helper
    if name == "VaultService":
        from .service import VaultService

        return VaultService
    raise AttributeError(name)
