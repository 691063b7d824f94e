"""
Stop criterion driven by an external cancellation flag.

The flag is the only state in this package meant to be touched from another
thread, e.g. a UI or supervisor. It is a ``threading.Event`` so a ``cancel``
call is visible to the next evaluation without further locking.
Cancellation is cooperative: it takes effect at the next
``determine_status`` call.
"""

import logging
import threading
from typing import Optional
import numpy as np

from ..status import CalculationStatus
from .base import StopCriterion

logger = logging.getLogger(__name__)


class CancellationCriterion(StopCriterion):
    """
    Reports CANCELLED once its flag has been set.

    Parameters
    ----------
    token : threading.Event, optional
        Externally owned flag, e.g. one token shared by several solves. When
        omitted the criterion owns a private flag.
    """

    name = "cancellation"

    def __init__(self, token: Optional[threading.Event] = None):
        super().__init__()
        self._external_token = token is not None
        self._token = token if token is not None else threading.Event()

    @property
    def token(self) -> threading.Event:
        return self._token

    @property
    def is_cancelled(self) -> bool:
        return self._token.is_set()

    def cancel(self):
        """Request cancellation. Safe to call from any thread, any number of times."""
        self._token.set()

    def cancel_after(self, seconds: float) -> threading.Timer:
        """
        Request cancellation once ``seconds`` have elapsed.

        Returns
        -------
        threading.Timer
            The started timer; call ``cancel()`` on it to disarm the timeout.
        """
        timer = threading.Timer(seconds, self.cancel)
        timer.daemon = True
        timer.start()
        logger.debug(f"Cancellation armed to fire in {seconds} s")
        return timer

    def _evaluate(self,
                  iteration_number: int,
                  solution: np.ndarray,
                  source: np.ndarray,
                  residual: np.ndarray) -> CalculationStatus:
        if self._token.is_set():
            return CalculationStatus.CANCELLED
        return CalculationStatus.RUNNING

    def _configuration(self) -> dict:
        # A private flag is per-solve state and is never handed to a clone
        if self._external_token:
            return {'token': self._token}
        return {}
