"""Fan-in barrier for concurrently issued reads"""
import logging
from concurrent.futures import Future, wait
from typing import Iterable, Optional

from aurora_staking.errors import ReadFailure

logger = logging.getLogger(__name__)


def wait_all(futures: Iterable[Future], timeout: Optional[float], what: str) -> None:
    """
    Block until every future has resolved, successfully or not.

    Raises:
        ReadFailure: If ``timeout`` elapses first; unstarted reads are cancelled
    """
    futures = list(futures)
    _, not_done = wait(futures, timeout=timeout)
    if not_done:
        cancelled = sum(1 for f in not_done if f.cancel())
        logger.warning(f"{what}: {len(not_done)} reads still running after {timeout}s ({cancelled} cancelled)")
        raise ReadFailure(what, f"timed out after {timeout}s with {len(not_done)} reads outstanding")
