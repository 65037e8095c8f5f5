"""Per-object random streams.

Every random draw in the pipeline (orbit fallbacks, orbit phase, hazard
jitter) comes from a ``random.Random`` seeded from the object id, so the same
record always produces the same assessment.  An optional run seed is mixed in
to vary results between runs while keeping each run reproducible.
"""

from __future__ import annotations

import hashlib
import random


def object_rng(object_id: str, seed: int | None = None) -> random.Random:
    """Return a fresh RNG seeded from ``object_id`` (and ``seed`` if given)."""
    material = object_id if seed is None else f"{seed}:{object_id}"
    digest = hashlib.sha256(material.encode("utf-8")).digest()
    return random.Random(int.from_bytes(digest[:8], "big"))
