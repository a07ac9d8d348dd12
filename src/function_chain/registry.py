"""
Receiver registry for relay chains.

A relay step written as ``"d2.decorate"`` runs ``decorate`` on whatever
object was registered under ``"d2"``. The registry maps those keys to
receivers for one chain.
"""

from collections.abc import Mapping
from typing import Any, Dict, List
import logging

from .exceptions import ReceiverNotFoundError

logger = logging.getLogger("function_chain")


class ReceiverRegistry:
    """
    Named receivers available to one relay chain.

    Example:
        >>> registry = ReceiverRegistry()
        >>> registry.register("d2", EncloseDecorator())
        >>> registry.get("d2").decorate("x")
        "'x'"
        >>> registry.get("d3")
        ReceiverNotFoundError: Unknown receiver: 'd3'. Did you mean: d2?
    """

    def __init__(self):
        self._receivers: Dict[str, Any] = {}

    def register(self, name: str, receiver: Any):
        """
        Register ``receiver`` under ``name``, replacing any earlier binding.

        Args:
            name: Key used in ``"name.operation"`` steps; must not contain "."
            receiver: Object the operation runs on

        Raises:
            TypeError: If name is not a string
            ValueError: If name is empty or contains "."
        """
        if not isinstance(name, str):
            raise TypeError(f"Receiver name must be a str, not {type(name).__name__}")
        if not name or "." in name:
            raise ValueError(f"Receiver name must be non-empty and contain no '.': {name!r}")

        self._receivers[name] = receiver
        logger.debug(f"Registered receiver: {name} -> {type(receiver).__name__}")

    def update(self, table: Mapping):
        """Register every ``name -> receiver`` pair of ``table``."""
        for name, receiver in table.items():
            self.register(name, receiver)

    def get(self, name: str) -> Any:
        """
        Get a receiver by name.

        Raises:
            ReceiverNotFoundError: If nothing is registered under name
                (includes suggestions)
        """
        if name not in self._receivers:
            raise ReceiverNotFoundError(name, list(self._receivers.keys()))
        return self._receivers[name]

    def has_receiver(self, name: str) -> bool:
        """Check if a receiver is registered."""
        return name in self._receivers

    def list_receivers(self) -> List[str]:
        """Registered names, sorted."""
        return sorted(self._receivers)

    def __contains__(self, name: str) -> bool:
        return name in self._receivers

    def __len__(self) -> int:
        return len(self._receivers)
