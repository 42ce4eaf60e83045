"""
Random source construction for reproducibility.

Every random draw (playouts, tie-breaks, the arena's random mover) goes
through an injected random.Random, so one seed fixes a whole run.
"""

from __future__ import annotations

import random
from typing import Optional


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Independent random source for one engine, seeded if 'seed' is given."""
    return random.Random(seed)
