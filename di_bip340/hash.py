"""
Hash step of the Data Integrity pipeline.

The digest that gets signed is

    SHA-256( utf8(canonical proof configuration) ‖ utf8(canonical document) )

Configuration first, document second: the order is part of the wire
format and must match every other implementation of the cryptosuite.
"""

from __future__ import annotations

import hashlib


def generate_hash(canonical_config: str, canonical_document: str) -> bytes:
    """Return the 32 raw digest bytes over config ‖ document."""
    h = hashlib.sha256()
    h.update(canonical_config.encode("utf-8"))
    h.update(canonical_document.encode("utf-8"))
    return h.digest()
