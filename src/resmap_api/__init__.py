from .config import (
    N_JOBS,
    MAX_GRID_CELLS,
    LOG_LEVEL,
)

__all__ = [
    "N_JOBS",
    "MAX_GRID_CELLS",
    "LOG_LEVEL",
    ]
