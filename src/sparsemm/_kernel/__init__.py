"""sparsemm private kernel package (_kernel).

Modules:
    - spgemm: Sequential compressed-column x compressed-column kernel
    - parallel: Column-partitioned driver over a thread pool
    - emit: Copy of the finished product into caller buffers

The public entry points live in ``sparsemm.ops``; nothing here validates
caller buffers.
"""

from . import spgemm
from . import parallel
from . import emit

__all__ = [
    'spgemm',
    'parallel',
    'emit',
]
