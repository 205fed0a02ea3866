from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


@contextmanager
def timed(section: str, timings: Optional[Dict[str, float]] = None) -> Iterator[None]:
    """Records the wall time of the block under `section`, also when the block raises."""
    start = time.perf_counter()
    try:
        yield
    finally:
        if timings is not None:
            timings[section] = timings.get(section, 0.0) + (time.perf_counter() - start)
