"""Background auto-close scheduler.

Runs as a supervised asyncio task owned by the application lifespan: the first
sweep happens on start, then one every ``interval_seconds``. Each sweep closes
expired ballots one transaction at a time, so a failure part-way through keeps
the ballots already closed. A failed sweep is logged and the next tick is the
retry.
"""
import asyncio
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from rangevote.core.config import settings
from rangevote.core.errors import NotFoundError
from rangevote.core.logging_config import get_logger
from rangevote.core.utils import utcnow
from rangevote.db.session import SessionLocal, get_db_context
from rangevote.services.lifecycle import close_ballot, get_ballots_to_auto_close

logger = get_logger(__name__)


@dataclass
class SweepReport:
    """Outcome of one auto-close sweep."""

    found: int = 0
    closed: List[str] = field(default_factory=list)
    failed: bool = False
    skipped: bool = False


class AutoCloseScheduler:
    """Periodically close ballots whose close date has passed."""

    def __init__(
        self,
        session_factory=None,
        *,
        interval_seconds: Optional[float] = None,
        now_fn: Optional[Callable[[], datetime]] = None,
    ):
        self._session_factory = session_factory or SessionLocal
        if interval_seconds is None:
            interval_seconds = settings.AUTO_CLOSE_INTERVAL_SECONDS
        self._interval = interval_seconds
        self._now_fn = now_fn or utcnow
        self._sweep_lock = threading.Lock()
        self._task: Optional[asyncio.Task] = None
        self._stopping: Optional[asyncio.Event] = None
        self.sweeps_completed = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="auto-close-scheduler")
        logger.info("auto_close_scheduler_started", interval_seconds=self._interval)

    async def stop(self, timeout: Optional[float] = 30.0) -> None:
        """
        Stop scheduling sweeps and wait for the loop to exit.

        An in-flight sweep is allowed to finish; only if it outlives ``timeout``
        is the task cancelled. Each ballot close is its own commit, so
        cancellation never leaves a ballot half-closed.
        """
        if self._task is None:
            return

        self._stopping.set()
        try:
            await asyncio.wait_for(asyncio.shield(self._task), timeout)
        except asyncio.TimeoutError:
            logger.warning("auto_close_scheduler_stop_timeout", timeout_seconds=timeout)
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        finally:
            self._task = None

        logger.info("auto_close_scheduler_stopped", sweeps_completed=self.sweeps_completed)

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.to_thread(self.run_sweep)
            except Exception:
                # run_sweep reports storage errors itself; anything else is a bug,
                # but it must not take the scheduler down with it
                logger.exception("auto_close_sweep_crashed")

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass

    def run_sweep(self, now: Optional[datetime] = None) -> SweepReport:
        """Close every expired open ballot. Safe to call directly."""
        if not self._sweep_lock.acquire(blocking=False):
            logger.warning("auto_close_sweep_skipped", reason="previous sweep still running")
            return SweepReport(skipped=True)

        try:
            return self._sweep(now or self._now_fn())
        finally:
            self._sweep_lock.release()

    def _sweep(self, now: datetime) -> SweepReport:
        report = SweepReport()

        with get_db_context(self._session_factory) as db:
            try:
                due = [(b.id, b.name) for b in get_ballots_to_auto_close(db, now)]
            except SQLAlchemyError as e:
                logger.error("auto_close_query_failed", error=str(e))
                report.failed = True
                return report

            report.found = len(due)
            logger.info("auto_close_sweep_started", found=report.found)

            for ballot_id, ballot_name in due:
                try:
                    close_ballot(db, ballot_id)
                except NotFoundError:
                    # Deleted between the query and the close
                    continue
                except SQLAlchemyError as e:
                    db.rollback()
                    logger.error(
                        "auto_close_sweep_failed",
                        ballot_id=ballot_id,
                        closed_before_failure=len(report.closed),
                        error=str(e),
                    )
                    report.failed = True
                    break

                report.closed.append(ballot_id)
                logger.info("ballot_auto_closed", ballot_id=ballot_id, ballot_name=ballot_name)

        self.sweeps_completed += 1
        return report
