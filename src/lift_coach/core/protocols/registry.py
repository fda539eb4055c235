"""
Rehab protocol registry.

Protocols are loaded from per-protocol YAML files in the bundled
``src/lift_coach/protocols/`` directory the first time they are needed.
If nothing can be loaded, a RuntimeError is raised: rehab integration
cannot work without a catalog.

User overrides: place matching files in ``~/.lift-coach/protocols/``.
"""

from functools import lru_cache

from ..models import RehabProtocol


@lru_cache(maxsize=1)
def get_protocol_catalog() -> tuple[RehabProtocol, ...]:
    """Return the loaded catalog (cached for the life of the process)."""
    from .loader import load_protocols_from_yaml

    loaded = load_protocols_from_yaml()
    if not loaded:
        raise RuntimeError(
            "lift-coach: no rehab protocols could be loaded from YAML. "
            "Check that src/lift_coach/protocols/*.yaml files are present and valid."
        )
    return tuple(loaded)


def get_protocol(protocol_id: str) -> RehabProtocol:
    """
    Return the protocol with the given id.

    Raises:
        ValueError: If protocol_id is not in the catalog
    """
    for protocol in get_protocol_catalog():
        if protocol.protocol_id == protocol_id:
            return protocol
    valid = ", ".join(p.protocol_id for p in get_protocol_catalog())
    raise ValueError(f"Unknown protocol '{protocol_id}'. Valid IDs: {valid}")
