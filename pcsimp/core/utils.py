from __future__ import annotations
import logging
from typing import List, Tuple

def get_logger(name: str = "pcsimp") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger

def split_ranges(n: int, parts: int) -> List[Tuple[int, int]]:
    """Split ``[0, n)`` into at most ``parts`` contiguous, disjoint ranges.

    Earlier ranges take the remainder, so sizes differ by at most one.
    Empty ranges are never returned.
    """
    if parts <= 0:
        raise ValueError("parts must be positive.")
    if n <= 0:
        return []
    parts = min(parts, n)
    base, extra = divmod(n, parts)
    ranges: List[Tuple[int, int]] = []
    start = 0
    for i in range(parts):
        stop = start + base + (1 if i < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges
