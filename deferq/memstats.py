"""Memory usage reporting for diagnostics."""

import os
import tracemalloc

_MB = 1024 * 1024


def heap_alloc_mb() -> float:
    """Return the memory currently allocated by the process, in megabytes."""
    if tracemalloc.is_tracing():
        return tracemalloc.get_traced_memory()[0] / _MB
    try:
        with open("/proc/self/statm", encoding="ascii") as statm:
            pages = int(statm.read().split()[1])
    except (OSError, ValueError, IndexError):
        return 0.0
    return pages * os.sysconf("SC_PAGE_SIZE") / _MB