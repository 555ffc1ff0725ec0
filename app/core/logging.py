import logging
import sys
from typing import Optional

from app.config import settings

SOLVER_LOGGER = "app.domain.services.xirr_solver"


def setup_logging(level: Optional[str] = None, solver_level: Optional[str] = None) -> None:
    """
    Configure centralized engine logging.

    Args:
        level: Root level (default: LOG_LEVEL setting)
        solver_level: Separate level for the XIRR solver, whose DEBUG output
            reports every fallback and not-computable series
            (default: SOLVER_LOG_LEVEL setting, else same as root)
    """
    root_level = _resolve_level(level or settings.LOG_LEVEL)
    logging.basicConfig(
        level=root_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    solver_level = solver_level or settings.SOLVER_LOG_LEVEL
    if solver_level:
        logging.getLogger(SOLVER_LOGGER).setLevel(_resolve_level(solver_level))


def _resolve_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)
