"""
Rehab protocol catalog for lift-coach.

Each protocol ties a body zone to corrective exercises tagged with where
they belong in a session.
"""

from .loader import load_protocols_from_dir, protocol_from_dict
from .registry import get_protocol, get_protocol_catalog

__all__ = [
    "get_protocol",
    "get_protocol_catalog",
    "load_protocols_from_dir",
    "protocol_from_dict",
]
