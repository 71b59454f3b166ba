"""Polling of remote state until it converges to the expected value"""

import enum
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from operator_verifier.exceptions import SchemaMismatch

logger = logging.getLogger(__name__)

# Relative slack for comparing accumulated sample times with the deadline
DEADLINE_TOLERANCE = 1e-9

Observer = Callable[[], int]


@dataclass(frozen=True)
class ObservationTarget:
    """Describes which object is observed and which count means it has converged"""

    namespace: str
    name: str
    desired_count: int

    def __post_init__(self):
        if self.desired_count < 0:
            raise ValueError(f"Desired count must not be negative, got {self.desired_count}")

    def __str__(self):
        return f"{self.namespace}/{self.name}"


class PollStatus(enum.Enum):
    """Terminal states of a single poll"""

    CONVERGED = "Converged"
    TIMED_OUT = "TimedOut"
    OBSERVATION_ERROR = "ObservationError"
    CANCELLED = "Cancelled"

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class PollOutcome:
    """Result of polling, carries enough context to diagnose failures"""

    status: PollStatus
    target: ObservationTarget
    last_count: Optional[int]
    samples: int
    elapsed: float
    error: Optional[Exception] = None

    @property
    def converged(self) -> bool:
        """True, if the observed count reached the desired count"""
        return self.status == PollStatus.CONVERGED

    def __bool__(self):
        return self.converged

    def __str__(self):
        message = (
            f"{self.status} for {self.target}: last observed count {self.last_count}, "
            f"desired {self.target.desired_count}, {self.samples} samples in {self.elapsed:.1f}s"
        )
        if self.error is not None:
            message += f", last error: {self.error!r}"
        return message


class ConvergencePoller:
    """
    Samples an observer once per `interval` seconds until it returns the desired count or `deadline` elapses.
    Up to `max_consecutive_failures` failed observations in a row are tolerated.
    Instance holds only configuration, so one poller can be shared by concurrent polls.
    """

    def __init__(
        self,
        interval: float,
        deadline: float,
        max_consecutive_failures: int = 3,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        if deadline < interval:
            raise ValueError(f"Deadline ({deadline}) must not be shorter than interval ({interval})")
        if max_consecutive_failures < 0:
            raise ValueError("Number of tolerated failures must not be negative")
        self.interval = interval
        self.deadline = deadline
        self.max_consecutive_failures = max_consecutive_failures
        self.clock = clock
        self._limit = deadline * (1 + DEADLINE_TOLERANCE)

    def poll_until(
        self, target: ObservationTarget, observe: Observer, cancel: Optional[threading.Event] = None
    ) -> PollOutcome:
        """
        Blocks until observed count equals `target.desired_count`, deadline passes or `cancel` is set.
        Samples are taken at 0, interval, 2*interval, ... and never after the deadline.
        """
        # pylint: disable=too-many-locals
        cancel = cancel or threading.Event()
        start = self.clock()
        samples = 0
        failures = 0
        last_count = None
        last_error = None

        def outcome(status):
            return PollOutcome(status, target, last_count, samples, self.clock() - start, last_error)

        while not cancel.is_set():
            samples += 1
            try:
                last_count = observe()
            except SchemaMismatch:
                raise
            except Exception as exc:  # pylint: disable=broad-except
                last_error = exc
                failures += 1
                logger.warning("Observation %d of %s failed (%d in a row): %s", samples, target, failures, exc)
                if failures > self.max_consecutive_failures:
                    return outcome(PollStatus.OBSERVATION_ERROR)
            else:
                failures = 0
                logger.debug("Observation %d of %s: %s/%s", samples, target, last_count, target.desired_count)
                if last_count == target.desired_count:
                    logger.info("%s converged to %s after %d samples", target, last_count, samples)
                    return outcome(PollStatus.CONVERGED)

            next_sample = samples * self.interval
            elapsed = self.clock() - start
            if next_sample > self._limit or elapsed > self._limit:
                return outcome(PollStatus.TIMED_OUT)
            if cancel.wait(max(next_sample - elapsed, 0)):
                break

        return outcome(PollStatus.CANCELLED)


def poll_until(
    target: ObservationTarget,
    interval: float,
    deadline: float,
    observe: Observer,
    max_consecutive_failures: int = 3,
    cancel: Optional[threading.Event] = None,
) -> PollOutcome:
    """Shortcut for single use ConvergencePoller"""
    return ConvergencePoller(interval, deadline, max_consecutive_failures).poll_until(target, observe, cancel)
