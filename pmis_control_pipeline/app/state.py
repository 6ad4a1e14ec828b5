"""
Application state controller.

Owns the live file set, the current mode, the analysis phase and the current
result. Every mutation notifies subscribers synchronously, before control goes
back to the event loop, so observers never miss an intermediate state
(e.g. the ANALYZING phase while the Gemini call is in flight).
"""

import logging
from typing import Callable, Dict, List, Optional

from .analyzer import analyze, fallback_result
from .request_builder import build_request
from .schemas import (
    AnalysisPhase,
    AnalysisResult,
    AppMode,
    DashboardState,
    FileCategory,
    FileSummary,
    FileType,
    ProjectFile,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[["AppStateController"], None]


class AppStateController:
    def __init__(self, analyzer=analyze, builder=build_request):
        self._analyzer = analyzer
        self._builder = builder
        self.mode: AppMode = AppMode.DASHBOARD
        self.phase: AnalysisPhase = AnalysisPhase.IDLE
        self.result: Optional[AnalysisResult] = None
        # keyed by declared type: at most one file per type, insertion-ordered
        self._files: Dict[FileType, ProjectFile] = {}
        self._subscribers: List[Subscriber] = []

    # ---- observation ----

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    @property
    def files(self) -> List[ProjectFile]:
        return list(self._files.values())

    @property
    def is_analyzing(self) -> bool:
        return self.phase == AnalysisPhase.ANALYZING

    @property
    def can_analyze(self) -> bool:
        """Whether "Generate Analysis" is enabled."""
        return bool(self._files) and not self.is_analyzing and self.mode != AppMode.DASHBOARD

    def file_for(self, declared_type: FileType) -> Optional[ProjectFile]:
        return self._files.get(declared_type)

    def readiness(self) -> Dict[FileCategory, bool]:
        present = {f.category for f in self._files.values()}
        return {
            FileCategory.SCHEDULE: FileCategory.SCHEDULE in present,
            FileCategory.FINANCIAL: FileCategory.FINANCIAL in present,
        }

    def snapshot(self) -> DashboardState:
        return DashboardState(
            mode=self.mode,
            phase=self.phase,
            files=[FileSummary.from_file(f) for f in self._files.values()],
            readiness=self.readiness(),
            can_analyze=self.can_analyze,
            result=self.result,
        )

    # ---- mutations ----

    def add_or_replace(self, project_file: ProjectFile) -> None:
        replaced = self._files.pop(project_file.type, None)
        self._files[project_file.type] = project_file
        if replaced is not None:
            logger.info(f"Replaced {replaced.name} with {project_file.name} for {project_file.type.value}")
        self._notify()

    def remove(self, file_id: str) -> bool:
        for declared_type, f in self._files.items():
            if f.id == file_id:
                del self._files[declared_type]
                logger.info(f"Removed {f.name} ({declared_type.value})")
                self._notify()
                return True
        return False

    def set_mode(self, mode: AppMode) -> None:
        self.mode = mode
        logger.info(f"Mode switched to {mode.value}")
        self._notify()

    async def run_analysis(self) -> Optional[AnalysisResult]:
        """
        Run one analysis for the current mode and file set.
        Returns None without touching any state when analysis is not possible
        (no files, dashboard mode, or a run already in flight).
        """
        if not self.can_analyze:
            return None

        mode = self.mode
        files = self.files
        self.phase = AnalysisPhase.ANALYZING
        logger.info(f"Starting {mode.value} analysis over {len(files)} file(s)")
        self._notify()

        try:
            try:
                request = self._builder(mode, files)
            except Exception as e:
                # e.g. a malformed GEMINI_THINKING_BUDGET: the run fails, the UI gets the fallback
                logger.error(f"Could not build {mode.value} request: {type(e).__name__}: {e}")
                result = fallback_result(mode)
            else:
                result = await self._analyzer(request)
            self.result = result
        finally:
            self.phase = AnalysisPhase.IDLE
            self._notify()

        return result
