import asyncio
import inspect
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union
from sqlalchemy.orm import Session

from jlpt_tryout.core.constants import SectionTypeEnum
from jlpt_tryout.core.database import SessionLocal
from jlpt_tryout.core.exceptions import SectionNotInAttempt, TimerExpired
from jlpt_tryout.core.scoring_config import get_scoring_config
from jlpt_tryout.schemas.test_attempt import SectionSubmitResult
from jlpt_tryout.services.test_attempt import TestAttemptService, test_attempt_service

logger = logging.getLogger(__name__)

ExpiryCallback = Callable[[], Union[None, Awaitable[None]]]


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


def format_seconds(seconds: float) -> str:
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class SectionTimer:
    """One-shot countdown for a test section.

    on_expire (sync or async) runs exactly once, and never before the full
    duration has been spent in the running state. An expired timer cannot be
    started, resumed or reset again.
    """

    def __init__(self, duration_seconds: float, on_expire: ExpiryCallback,
                 clock: Callable[[], float] = time.monotonic):
        if duration_seconds <= 0:
            raise ValueError("duration_seconds must be positive")
        self.duration_seconds = duration_seconds
        self._on_expire = on_expire
        self._clock = clock
        self._state = TimerState.IDLE
        self._remaining = float(duration_seconds)
        self._running_since: Optional[float] = None
        self._countdown: Optional[asyncio.Task] = None
        self._expiry: Optional[asyncio.Task] = None
        self._expired = asyncio.Event()

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining_seconds(self) -> float:
        if self._state == TimerState.RUNNING:
            return max(0.0, self._remaining - (self._clock() - self._running_since))
        return self._remaining

    @property
    def elapsed_seconds(self) -> float:
        return self.duration_seconds - self.remaining_seconds

    def format_remaining(self) -> str:
        return format_seconds(self.remaining_seconds)

    def start(self):
        if self._state == TimerState.EXPIRED:
            raise TimerExpired()
        if self._state == TimerState.PAUSED:
            self.resume()
        elif self._state == TimerState.IDLE:
            self._run()

    def pause(self):
        if self._state != TimerState.RUNNING:
            return
        self._remaining = self.remaining_seconds
        self._running_since = None
        self._state = TimerState.PAUSED
        self._cancel_countdown()

    def resume(self):
        if self._state == TimerState.EXPIRED:
            raise TimerExpired()
        if self._state == TimerState.PAUSED:
            self._run()

    def reset(self):
        if self._state == TimerState.EXPIRED:
            raise TimerExpired()
        self._cancel_countdown()
        self._remaining = float(self.duration_seconds)
        self._running_since = None
        self._state = TimerState.IDLE

    async def wait(self):
        """Wait for expiry, re-raising anything on_expire raised."""
        await self._expired.wait()
        await self._expiry

    def _run(self):
        self._running_since = self._clock()
        self._state = TimerState.RUNNING
        self._countdown = asyncio.get_running_loop().create_task(self._count_down())

    def _cancel_countdown(self):
        if self._countdown is not None and not self._countdown.done():
            self._countdown.cancel()
        self._countdown = None

    async def _count_down(self):
        while self.remaining_seconds > 0:
            await asyncio.sleep(self.remaining_seconds)
        if self._state != TimerState.RUNNING:
            return
        self._remaining = 0.0
        self._running_since = None
        self._state = TimerState.EXPIRED
        self._countdown = None
        self._expiry = asyncio.current_task()
        try:
            result = self._on_expire()
            if inspect.isawaitable(result):
                await result
        finally:
            self._expired.set()


class TimedSectionSubmitter:
    """Binds a SectionTimer to one (attempt, section, owner) and submits the
    section when time runs out. A section that is already locked when the
    timer fires is not an error."""

    def __init__(self, attempt_id: int, section_type: SectionTypeEnum, owner_id: str, duration_seconds: float,
                 session_factory: Callable[[], Session] = SessionLocal,
                 service: TestAttemptService = test_attempt_service,
                 clock: Callable[[], float] = time.monotonic):
        self.attempt_id = attempt_id
        self.section_type = SectionTypeEnum(section_type)
        self.owner_id = owner_id
        self._session_factory = session_factory
        self._service = service
        self.result: Optional[SectionSubmitResult] = None
        self.timer = SectionTimer(duration_seconds, self._on_expire, clock=clock)

    @classmethod
    def for_attempt(cls, db: Session, attempt_id: int, section_type: SectionTypeEnum, owner_id: str,
                    **kwargs: Any) -> "TimedSectionSubmitter":
        """Timer for a section of an existing attempt, sized from its scoring configuration."""
        attempt = kwargs.get("service", test_attempt_service).get_attempt(db, attempt_id, owner_id)
        if SectionTypeEnum(section_type) not in [s.section_type for s in attempt.sections]:
            raise SectionNotInAttempt(details={"section_type": SectionTypeEnum(section_type).value})
        config = get_scoring_config(attempt.scoring_config_version)
        duration = config.section(attempt.level, section_type).duration_minutes * 60
        return cls(attempt_id, section_type, owner_id, duration_seconds=duration, **kwargs)

    async def _on_expire(self):
        self.result = await asyncio.to_thread(self.submit_now)

    def submit_now(self) -> SectionSubmitResult:
        db = self._session_factory()
        try:
            result = self._service.submit_and_try_complete(
                db,
                attempt_id=self.attempt_id,
                section_type=self.section_type,
                time_spent_seconds=int(round(self.timer.elapsed_seconds)),
                requester_id=self.owner_id,
                triggered_by_timer=True,
            )
        finally:
            db.close()
        logger.info(
            f"Timer submitted section {self.section_type.value} of attempt {self.attempt_id}",
            extra={"attempt_id": self.attempt_id, "already_submitted": result.already_submitted}
        )
        return result

    def start(self):
        self.timer.start()

    def pause(self):
        self.timer.pause()

    def resume(self):
        self.timer.resume()

    async def wait(self) -> Optional[SectionSubmitResult]:
        await self.timer.wait()
        return self.result
