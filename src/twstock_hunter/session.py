"""In-memory analysis session.

Holds the current AnalysisState and moves it through
idle -> analyzing -> complete | error, driven only by the outcome of
one analysis call. The report lives here until cleared or replaced.
"""

import threading
from typing import Callable, Optional

from .config import Settings
from .errors import AnalysisError
from .llm.analyze import request_analysis
from .log import get_logger
from .schemas.report import AnalysisReport
from .schemas.state import AnalysisState, AnalyzingState, CompleteState, ErrorState, IdleState

logger = get_logger("session")

FALLBACK_ERROR_MESSAGE = "分析過程中發生錯誤，請檢查 API Key 或稍後再試。"

Analyzer = Callable[[Settings], AnalysisReport]


class AnalysisSession:
    def __init__(self, settings: Settings, analyze: Analyzer = request_analysis):
        self.settings = settings
        self._analyze = analyze
        self._state: AnalysisState = IdleState()
        self._lock = threading.Lock()
        self._started = False

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def report(self) -> Optional[AnalysisReport]:
        return self._state.report if isinstance(self._state, CompleteState) else None

    @property
    def is_busy(self) -> bool:
        return isinstance(self._state, AnalyzingState)

    def begin(self) -> bool:
        """
        Enter the analyzing state. Returns False (and changes nothing) when
        another analysis is already in flight.
        """
        with self._lock:
            if isinstance(self._state, AnalyzingState):
                logger.warning("Analysis already in progress, ignoring request")
                return False
            self._state = AnalyzingState()
            return True

    def execute(self) -> AnalysisState:
        """Perform the analysis call started by begin() and store its outcome."""
        try:
            report = self._analyze(self.settings)
            new_state = CompleteState(report=report)
        except AnalysisError as e:
            new_state = ErrorState(message=str(e) or FALLBACK_ERROR_MESSAGE)
        except Exception as e:
            # Unexpected failures still end up on screen with a retry action
            logger.exception("Unexpected analysis error")
            new_state = ErrorState(message=str(e) or FALLBACK_ERROR_MESSAGE)

        with self._lock:
            self._state = new_state
        return new_state

    def run(self) -> AnalysisState:
        """Run one analysis to completion. Overlapping calls return the current state."""
        if not self.begin():
            return self._state
        return self.execute()

    retry = run

    def start_once(self) -> AnalysisState:
        """Entry action: the first call runs an analysis, later calls are no-ops."""
        with self._lock:
            if self._started:
                return self._state
            self._started = True
        logger.info("Running initial analysis")
        return self.run()

    def clear(self) -> AnalysisState:
        """Discard the report or error and return to idle."""
        with self._lock:
            if isinstance(self._state, AnalyzingState):
                logger.info("Clear ignored while an analysis is running")
            else:
                self._state = IdleState()
            return self._state
