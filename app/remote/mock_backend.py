"""
In-memory stand-in for the Healify backend.

Serves both the in-process MockHealthService and the development HTTP
server. Accounts, profiles and history live in memory; passwords are
bcrypt-hashed and credentials are signed JWTs.

The scoring here is a placeholder, not a model: it averages the answers
and adds jitter.
"""
from __future__ import annotations

import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, List, Mapping, Optional

from app.catalog import MAX_ANSWER, MIN_ANSWER, AssessmentType, get_assessment
from app.errors import (
    InvalidCredentialsError,
    RegistrationRejectedError,
    UnauthorizedError,
    ValidationError,
)
from app.models import HistoryEntry, PredictionResult, RiskFactor
from auth.models import Account, Profile
from auth.password import BCRYPT_ROUNDS, hash_password, verify_password
from auth.tokens import create_access_token, decode_token

_logger = logging.getLogger(__name__)

DEMO_EMAIL = "user@example.com"
DEMO_PASSWORD = "password123"
DEMO_ACCOUNT_ID = "user-123"
DEMO_PROFILE = Profile(age=28, weight=70, height=175, smoking=False, drinking=True)
DEMO_HISTORY = (
    HistoryEntry(AssessmentType.DIABETES, date(2024, 1, 15), 72),
    HistoryEntry(AssessmentType.THYROID, date(2024, 1, 10), 34),
    HistoryEntry(AssessmentType.DIABETES, date(2024, 1, 5), 68),
    HistoryEntry(AssessmentType.HEART_DISEASE, date(2024, 1, 1), 45),
)

# Placeholder scoring bounds
SCORE_FLOOR = 5
SCORE_CEILING = 95
SCORE_JITTER = 10
FACTOR_CAPS = (("High BMI", 50), ("Age Factor", 30), ("Lifestyle", 25))


@dataclass
class StoredAccount:
    id: str
    email: str
    password_hash: str
    profile: Profile = field(default_factory=Profile)
    history: List[HistoryEntry] = field(default_factory=list)  # newest first

    def to_account(self) -> Account:
        return Account(id=self.id, email=self.email, profile=self.profile)


class MockBackend:
    """
    In-memory account, profile and prediction service.

    Thread-safe for basic operations.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        seed_demo: bool = True,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize backend.

        Args:
            secret_key: JWT signing key (default from HEALIFY_JWT_SECRET)
            bcrypt_rounds: bcrypt cost for stored passwords
            seed_demo: Create the demo account with profile and history
            rng: Random source for scoring (seed it for determinism)
        """
        self._secret_key = secret_key
        self._bcrypt_rounds = bcrypt_rounds
        self._rng = rng or random.Random()
        self._accounts: Dict[str, StoredAccount] = {}  # keyed by email
        self._lock = threading.RLock()

        if seed_demo:
            self._seed_demo()

    def _seed_demo(self) -> None:
        self._accounts[DEMO_EMAIL] = StoredAccount(
            id=DEMO_ACCOUNT_ID,
            email=DEMO_EMAIL,
            password_hash=hash_password(DEMO_PASSWORD, rounds=self._bcrypt_rounds),
            profile=DEMO_PROFILE,
            history=list(DEMO_HISTORY),
        )

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    def register(self, email: str, password: str) -> str:
        email = email.lower().strip()
        if not email or not password:
            raise RegistrationRejectedError("Registration failed. Please check your details.")

        with self._lock:
            if email in self._accounts:
                raise RegistrationRejectedError(
                    "User with this email already exists.", status_code=409
                )
            self._accounts[email] = StoredAccount(
                id=str(uuid.uuid4()),
                email=email,
                password_hash=hash_password(password, rounds=self._bcrypt_rounds),
            )

        _logger.info(f"Registered account: {email}")
        return "User registered successfully."

    def login(self, email: str, password: str) -> tuple:
        """Returns (token, Account)."""
        email = email.lower().strip()
        with self._lock:
            stored = self._accounts.get(email)

        if stored is None or not verify_password(password, stored.password_hash):
            _logger.warning(f"Failed login for: {email}")
            raise InvalidCredentialsError("Invalid credentials.")

        token = create_access_token(stored.id, secret_key=self._secret_key)
        return token, stored.to_account()

    def _authenticate(self, token: Optional[str]) -> StoredAccount:
        account_id = decode_token(token, secret_key=self._secret_key) if token else None
        if account_id is None:
            raise UnauthorizedError("Invalid or expired token")

        with self._lock:
            for stored in self._accounts.values():
                if stored.id == account_id:
                    return stored
        raise UnauthorizedError("Account no longer exists")

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    def get_profile(self, token: Optional[str]) -> Profile:
        return self._authenticate(token).profile

    def update_profile(self, token: Optional[str], profile: Profile) -> Profile:
        stored = self._authenticate(token)
        if not profile.is_complete:
            raise ValidationError(
                "Age, weight and height are required.",
                field_errors={name: "Required" for name in profile.missing_fields},
            )
        with self._lock:
            stored.profile = profile
        return profile

    # -------------------------------------------------------------------------
    # Predictions
    # -------------------------------------------------------------------------

    def score(
        self,
        token: Optional[str],
        assessment_type: AssessmentType,
        answers: Mapping[str, int],
    ) -> PredictionResult:
        stored = self._authenticate(token)
        self._check_answers(assessment_type, answers)

        values = list(answers.values())
        average = sum(values) / len(values) if values else 0
        jittered = average + self._rng.uniform(-SCORE_JITTER, SCORE_JITTER)
        percentage = round(min(max(jittered, SCORE_FLOOR), SCORE_CEILING))

        factors = tuple(
            RiskFactor(name=name, impact=round(self._rng.random() * cap))
            for name, cap in FACTOR_CAPS
        )
        result = PredictionResult(
            disease=assessment_type,
            percentage=percentage,
            risk_factors=factors,
            timestamp=datetime.now(timezone.utc),
        )

        with self._lock:
            stored.history.insert(
                0,
                HistoryEntry(
                    disease=assessment_type,
                    date=result.timestamp.date(),
                    percentage=percentage,
                ),
            )
        return result

    @staticmethod
    def _check_answers(assessment_type: AssessmentType, answers: Mapping[str, int]) -> None:
        assessment = get_assessment(assessment_type)
        if assessment is None:
            raise ValidationError(f"Unknown assessment type: {assessment_type}")

        unknown = sorted(set(answers) - set(assessment.question_keys))
        if unknown:
            raise ValidationError(f"Unknown question(s): {', '.join(unknown)}")

        for key, value in answers.items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"Answer for {key} must be an integer")
            if not MIN_ANSWER <= value <= MAX_ANSWER:
                raise ValidationError(f"Answer for {key} must be between 0 and 100")

    def get_history(self, token: Optional[str]) -> List[HistoryEntry]:
        stored = self._authenticate(token)
        with self._lock:
            return list(stored.history)
