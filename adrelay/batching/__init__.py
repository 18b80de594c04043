from .assembly import assemble_chunks
from .sweeper import StaleBatchSweeper
from .accumulator import BatchAccumulator

__all__ = ["BatchAccumulator", "StaleBatchSweeper", "assemble_chunks"]
