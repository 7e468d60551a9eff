"""
Mock remote service for development and testing.
Runs the in-memory MockBackend in-process with simulated latency.
"""

import asyncio
from typing import List, Mapping, Optional

from app.catalog import AssessmentType
from app.models import HistoryEntry, PredictionResult
from app.remote.base import HealthService, LoginResult
from app.remote.mock_backend import MockBackend
from auth.models import Profile


class MockHealthService(HealthService):
    """
    In-process remote service.
    Simulates network latency (default 100ms) before each call.
    """

    def __init__(self, backend: Optional[MockBackend] = None, latency_ms: int = 100):
        self.backend = backend or MockBackend()
        self.latency_ms = latency_ms

    @property
    def source_name(self) -> str:
        return "mock"

    async def _latency(self) -> None:
        await asyncio.sleep(self.latency_ms / 1000)

    async def login(self, email: str, password: str) -> LoginResult:
        await self._latency()
        token, account = self.backend.login(email, password)
        return LoginResult(credential=token, account=account)

    async def register(self, email: str, password: str) -> str:
        await self._latency()
        return self.backend.register(email, password)

    async def get_profile(self, credential: str) -> Profile:
        await self._latency()
        return self.backend.get_profile(credential)

    async def update_profile(self, credential: str, profile: Profile) -> Profile:
        await self._latency()
        return self.backend.update_profile(credential, profile)

    async def score(
        self,
        credential: str,
        assessment_type: AssessmentType,
        answers: Mapping[str, int],
    ) -> PredictionResult:
        # Scoring is the slow call
        await asyncio.sleep(2 * self.latency_ms / 1000)
        return self.backend.score(credential, assessment_type, answers)

    async def get_history(self, credential: str) -> List[HistoryEntry]:
        await self._latency()
        return self.backend.get_history(credential)
