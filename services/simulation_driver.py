"""
Simulation Driver Service.

Ticks a topology session at a cadence derived from its speed so packets
animate hop by hop in the GUI.
"""

import logging
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .topology_session import TopologySession

logger = logging.getLogger(__name__)


class SimulationDriver(QObject):
    """
    Calls ``advance_step`` on a session at a fixed interval.

    The interval is ``base_tick_ms / speed``. The driver stops itself once
    no packet is traveling any more. Ticks run on the Qt event loop, so
    one tick always completes before the next starts.
    """

    # Signals
    ticked = pyqtSignal(int)   # Tick count since start
    finished = pyqtSignal()

    def __init__(self, session: TopologySession, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._session = session
        self._tick_count = 0

        # Timer for stepping
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._advance)

    @property
    def session(self) -> TopologySession:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._session.tick_interval_ms()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def start(self) -> bool:
        """Start ticking; does nothing if no simulation is running."""
        if not self._session.is_running:
            return False

        self._tick_count = 0
        self._timer.start(self.interval_ms)
        logger.debug(f"Driver started at {self.interval_ms} ms per tick")
        return True

    def stop(self):
        """Stop ticking. In-flight packets stay where they are."""
        self._timer.stop()

    def set_speed(self, speed: int) -> int:
        """Change the session speed and retime the running timer."""
        speed = self._session.set_speed(speed)
        if self._timer.isActive():
            self._timer.setInterval(self.interval_ms)
        return speed

    def _advance(self):
        """Advance the session by one tick."""
        if not self._session.is_running:
            self._finish()
            return

        self._session.advance_step()
        self._tick_count += 1
        self.ticked.emit(self._tick_count)

        if not self._session.is_running:
            self._finish()

    def _finish(self):
        self._timer.stop()
        logger.debug(f"Driver finished after {self._tick_count} tick(s)")
        self.finished.emit()
