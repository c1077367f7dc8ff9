# Cart persistence adapters

from .base import CartAdapter
from .ephemeral import EphemeralCartAdapter
from .durable import DurableCartAdapter

__all__ = ["CartAdapter", "EphemeralCartAdapter", "DurableCartAdapter"]
