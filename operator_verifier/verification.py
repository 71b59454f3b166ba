"""Ensures desired resource exists and waits until its effect is reconciled"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from operator_verifier.poller import ConvergencePoller, ObservationTarget, Observer, PollOutcome
from operator_verifier.resource import DesiredResource, ResourceEnsurer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationReport:
    """Result of a single verification of desired resource"""

    resource: DesiredResource
    existed: bool
    outcome: PollOutcome

    @property
    def success(self) -> bool:
        """True, if dependent state converged"""
        return self.outcome.converged

    def __str__(self):
        origin = "pre-existing" if self.existed else "created"
        return f"{self.resource.identity} ({origin}): {self.outcome}"


def verify(
    ensurer: ResourceEnsurer,
    poller: ConvergencePoller,
    desired: DesiredResource,
    target: ObservationTarget,
    observe: Observer,
    cancel: Optional[threading.Event] = None,
) -> VerificationReport:
    """
    Makes sure `desired` exists and then polls `observe` until it reports `target.desired_count`.
    Errors from the store while ensuring the resource are raised, polling results are returned in the report.
    """
    existed = ensurer.ensure(desired)
    logger.info("Waiting for %s to reconcile %s", target, desired.identity)
    outcome = poller.poll_until(target, observe, cancel)
    report = VerificationReport(desired, existed, outcome)
    if not report.success:
        logger.warning("Verification failed: %s", report)
    return report
