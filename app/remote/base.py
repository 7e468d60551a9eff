"""
Remote service interface.

The only component that issues network-dependent calls. Every
implementation returns domain objects and raises only the normalized
errors in app.errors, never transport-specific exceptions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Mapping

from app.catalog import AssessmentType
from app.models import HistoryEntry, PredictionResult
from auth.models import Account, Profile


@dataclass(frozen=True)
class LoginResult:
    credential: str
    account: Account


class HealthService(ABC):
    """
    Abstract base class for the Healify remote service.

    All operations are single-shot: no implicit retry.
    """

    @abstractmethod
    async def login(self, email: str, password: str) -> LoginResult:
        """
        Exchange email/password for a credential and account.

        Raises:
            InvalidCredentialsError: Credentials rejected
            ServiceError: Any other failure
        """

    @abstractmethod
    async def register(self, email: str, password: str) -> str:
        """
        Create an account. Returns the service's confirmation message.

        Raises:
            RegistrationRejectedError: Registration refused
            ServiceError: Any other failure
        """

    @abstractmethod
    async def get_profile(self, credential: str) -> Profile:
        """
        Raises:
            UnauthorizedError: Credential rejected
            ServiceError: Any other failure
        """

    @abstractmethod
    async def update_profile(self, credential: str, profile: Profile) -> Profile:
        """
        Replace the stored profile. Returns the profile as stored.

        Raises:
            UnauthorizedError: Credential rejected
            ValidationError: Profile rejected by the service
            ServiceError: Any other failure
        """

    @abstractmethod
    async def score(
        self,
        credential: str,
        assessment_type: AssessmentType,
        answers: Mapping[str, int],
    ) -> PredictionResult:
        """
        Score one completed questionnaire.

        Raises:
            UnauthorizedError: Credential rejected
            ServiceError: Any other failure, including a partial result
        """

    @abstractmethod
    async def get_history(self, credential: str) -> List[HistoryEntry]:
        """
        Raises:
            UnauthorizedError: Credential rejected
            ServiceError: Any other failure
        """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Implementation identifier (e.g., 'http', 'mock')."""
