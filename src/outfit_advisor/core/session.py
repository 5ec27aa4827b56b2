"""Per-screen analysis session: loading state, retry and recommendation cache."""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .models import AnalysisResult, CompleteOutfitAnalysis
from .orchestrator import OutfitOrchestrator

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ImageSource:
    """What the user last submitted; kept so a retry can resubmit it."""

    uri: Optional[str] = None
    raw: Optional[bytes] = None
    mime_type: Optional[str] = None
    filename: Optional[str] = None


class SessionError(Exception):
    """The session is not in a state that allows the requested action."""


class AnalysisSession:
    """
    Drives one image through the orchestrator.

    States move ``idle -> loading -> success | error``. ``error`` is only
    reached when the orchestrator raises, since the clients fall back on their
    own. The complete analysis is cached until the next image is submitted.
    """

    def __init__(self, orchestrator: OutfitOrchestrator, session_id: Optional[str] = None):
        self.orchestrator = orchestrator
        self.id = session_id or uuid.uuid4().hex
        self.state = SessionState.IDLE
        self.analysis: Optional[AnalysisResult] = None
        self.error: Optional[str] = None
        self._source: Optional[ImageSource] = None
        self._complete: Optional[CompleteOutfitAnalysis] = None
        # Bumped on every submission; results from older ones are discarded
        self._generation = 0

    @property
    def has_cached_recommendations(self) -> bool:
        return self._complete is not None

    async def submit(self, uri: str) -> Optional[AnalysisResult]:
        """Analyze a new image URI, invalidating cached recommendations."""
        return await self._run(ImageSource(uri=uri))

    async def submit_upload(
        self,
        raw: bytes,
        mime_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> Optional[AnalysisResult]:
        return await self._run(ImageSource(raw=raw, mime_type=mime_type, filename=filename))

    async def retry(self) -> Optional[AnalysisResult]:
        """Resubmit the last image."""
        if self._source is None:
            raise SessionError("Nothing to retry: no image has been submitted")
        return await self._run(self._source)

    async def recommendations(self) -> CompleteOutfitAnalysis:
        """Return the complete analysis, computing it once per submitted image."""
        if self.analysis is None:
            raise SessionError("No analysis available yet")

        if self._complete is not None:
            return self._complete

        generation = self._generation
        complete = await self.orchestrator.get_complete_outfit_analysis(self.analysis)
        if generation == self._generation:
            self._complete = complete
        return complete

    async def _run(self, source: ImageSource) -> Optional[AnalysisResult]:
        self._generation += 1
        generation = self._generation
        self._source = source
        self._complete = None
        self.analysis = None
        self.error = None
        self.state = SessionState.LOADING

        try:
            if source.uri is not None:
                analysis = await self.orchestrator.analyze_image(source.uri)
            else:
                analysis = await self.orchestrator.analyze_upload(
                    source.raw or b"", mime_type=source.mime_type, filename=source.filename
                )
        except Exception:
            logger.exception("Analysis session %s failed", self.id)
            if generation != self._generation:
                return None
            self.state = SessionState.ERROR
            self.error = "Failed to analyze the outfit. Please try again."
            return None

        if generation != self._generation:
            # A later submission owns the session state now
            return analysis
        self.analysis = analysis
        self.state = SessionState.SUCCESS
        return analysis

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "state": self.state.value,
            "error": self.error,
            "analysis": self.analysis.to_json_dict() if self.analysis else None,
            "hasRecommendations": self.has_cached_recommendations,
        }
