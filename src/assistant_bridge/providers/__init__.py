"""Bundled capability providers."""

from assistant_bridge.providers.calculator import Calculator

__all__ = ["Calculator"]
