# auth/tests/test_auth.py
"""
Comprehensive tests for authentication module.

Tests:
- Profile / Account / Session models
- SessionStore (startup recovery, login, logout, invalidation, merges)
- Route guard
- Form validation and password strength
- Password hashing and JWT tokens
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Tuple

import pytest

from app.errors import InvalidStateError, ValidationError
from auth.guard import (
    DEFAULT_LANDING_PATH,
    HOME_PATH,
    SIGN_IN_PATH,
    GuardOutcome,
    Pending,
    Redirect,
    Render,
    evaluate,
    is_protected,
    parse_predict_path,
    post_login_destination,
    predict_path,
    resolve,
)
from auth.models import Account, Profile, Session
from auth.password import (
    check_password_strength,
    hash_password,
    verify_password,
)
from auth.store import SessionStore
from auth.tokens import create_access_token, decode_token
from auth.validation import (
    FORM_ERROR_MESSAGE,
    validate_login_form,
    validate_profile_form,
    validate_registration_form,
)
from persistence.sessions import SessionStorage

COMPLETE_PROFILE = Profile(age=28, weight=70, height=175, smoking=False, drinking=True)


def make_account(profile: Optional[Profile] = None) -> Account:
    return Account(id="user-1", email="user@example.com", profile=profile or Profile())


class MemoryStorage(SessionStorage):
    """In-memory SessionStorage that can be told to fail."""

    def __init__(self, saved: Optional[Tuple[str, Account]] = None, fail: bool = False):
        self.saved = saved
        self.fail = fail
        self.save_calls = 0
        self.clear_calls = 0

    def load(self):
        if self.fail:
            raise OSError("disk unavailable")
        return self.saved

    def save(self, credential, account):
        self.save_calls += 1
        if self.fail:
            raise OSError("disk unavailable")
        self.saved = (credential, account)

    def clear(self):
        self.clear_calls += 1
        if self.fail:
            raise OSError("disk unavailable")
        self.saved = None


@pytest.fixture
def store():
    s = SessionStore()
    s.initialize()
    return s


# =============================================================================
# Model Tests
# =============================================================================


class TestProfile:
    """Tests for Profile model."""

    def test_empty_profile_incomplete(self):
        profile = Profile()
        assert profile.is_complete is False
        assert profile.missing_fields == ["age", "weight", "height"]

    def test_complete_profile(self):
        assert COMPLETE_PROFILE.is_complete is True
        assert COMPLETE_PROFILE.missing_fields == []

    def test_zero_counts_as_missing(self):
        """A zero measurement is treated the same as an absent one."""
        profile = Profile(age=0, weight=70, height=175)
        assert profile.is_complete is False
        assert profile.missing_fields == ["age"]

    def test_merged_is_shallow_and_returns_copy(self):
        merged = COMPLETE_PROFILE.merged({"weight": 72, "smoking": True})

        assert merged.weight == 72
        assert merged.smoking is True
        assert merged.age == 28
        assert COMPLETE_PROFILE.weight == 70

    def test_merged_rejects_unknown_fields(self):
        with pytest.raises(ValidationError) as exc:
            COMPLETE_PROFILE.merged({"blood_type": "A"})
        assert "blood_type" in exc.value.field_errors

    def test_from_dict_none_is_empty(self):
        assert Profile.from_dict(None) == Profile()

    def test_dict_round_trip(self):
        assert Profile.from_dict(COMPLETE_PROFILE.to_dict()) == COMPLETE_PROFILE


class TestAccount:
    """Tests for Account model."""

    def test_default_profile_present(self):
        account = Account(id="a", email="a@example.com")
        assert account.profile == Profile()

    def test_from_dict_normalizes_email(self):
        account = Account.from_dict({"id": 7, "email": "  User@Example.COM "})
        assert account.id == "7"
        assert account.email == "user@example.com"
        assert account.profile == Profile()

    def test_with_profile(self):
        account = make_account()
        updated = account.with_profile(COMPLETE_PROFILE)
        assert updated.profile == COMPLETE_PROFILE
        assert account.profile == Profile()


class TestSessionModel:
    """Tests for Session snapshot."""

    def test_authenticated_needs_both(self):
        assert Session(credential="t", account=None).is_authenticated is False
        assert Session(credential=None, account=make_account()).is_authenticated is False
        assert Session(credential="t", account=make_account()).is_authenticated is True


# =============================================================================
# Session Store Tests
# =============================================================================


class TestSessionStoreLifecycle:
    """Tests for startup recovery."""

    def test_starts_initializing(self):
        s = SessionStore()
        assert s.is_initializing is True
        assert s.is_authenticated is False

    def test_initialize_without_storage(self):
        s = SessionStore()
        s.initialize()
        assert s.is_initializing is False
        assert s.is_authenticated is False

    def test_initialize_recovers_saved_session(self):
        account = make_account(COMPLETE_PROFILE)
        s = SessionStore(storage=MemoryStorage(saved=("tok", account)))
        s.initialize()

        assert s.is_authenticated is True
        assert s.credential == "tok"
        assert s.account == account

    def test_initialize_storage_failure_is_swallowed(self):
        """A failing storage means no prior session, never an exception."""
        s = SessionStore(storage=MemoryStorage(fail=True))
        s.initialize()

        assert s.is_initializing is False
        assert s.is_authenticated is False

    def test_initialize_runs_once(self):
        storage = MemoryStorage()
        s = SessionStore(storage=storage)
        s.initialize()
        storage.saved = ("tok", make_account())
        s.initialize()

        assert s.is_authenticated is False


class TestSessionStoreMutations:
    """Tests for login/logout/invalidate/update_profile."""

    def test_login_sets_session(self, store):
        account = make_account()
        store.login(account, "tok")

        assert store.is_authenticated is True
        assert store.credential == "tok"
        assert store.account == account

    def test_login_requires_credential(self, store):
        with pytest.raises(InvalidStateError):
            store.login(make_account(), "")
        assert store.is_authenticated is False

    def test_logout_clears_session(self, store):
        store.login(make_account(), "tok")
        store.logout()

        assert store.is_authenticated is False
        assert store.credential is None
        assert store.account is None

    def test_logout_is_idempotent(self, store):
        store.logout()
        store.logout()
        assert store.is_authenticated is False

    def test_invalidate_logs_out(self, store):
        store.login(make_account(), "tok")
        store.invalidate("expired")
        assert store.is_authenticated is False

    def test_profile_completeness(self, store):
        assert store.is_profile_complete() is False
        store.login(make_account(), "tok")
        assert store.is_profile_complete() is False
        store.update_profile({"age": 30, "weight": 80, "height": 180})
        assert store.is_profile_complete() is True

    def test_update_profile_merges(self, store):
        store.login(make_account(COMPLETE_PROFILE), "tok")
        merged = store.update_profile({"drinking": False})

        assert merged.drinking is False
        assert merged.age == 28
        assert store.account.profile == merged

    def test_update_profile_logged_out(self, store):
        with pytest.raises(InvalidStateError):
            store.update_profile({"age": 30})

    def test_snapshot_is_immutable_copy(self, store):
        store.login(make_account(), "tok")
        snap = store.snapshot()
        store.logout()

        assert snap.is_authenticated is True
        assert store.snapshot().is_authenticated is False


class TestSessionStoreMirroring:
    """Tests for durable storage mirroring."""

    def test_login_and_profile_update_are_saved(self):
        storage = MemoryStorage()
        s = SessionStore(storage=storage)
        s.initialize()

        s.login(make_account(), "tok")
        s.update_profile({"age": 40})

        assert storage.save_calls == 2
        assert storage.saved[1].profile.age == 40

    def test_logout_clears_storage(self):
        storage = MemoryStorage()
        s = SessionStore(storage=storage)
        s.initialize()
        s.login(make_account(), "tok")
        s.logout()

        assert storage.saved is None

    def test_storage_failure_does_not_block_login(self):
        storage = MemoryStorage(fail=True)
        s = SessionStore(storage=storage)
        s.initialize()
        s.login(make_account(), "tok")
        s.logout()

        assert storage.save_calls == 1
        assert storage.clear_calls == 1
        assert s.is_authenticated is False


# =============================================================================
# Route Guard Tests
# =============================================================================


class TestGuard:
    """Tests for the route guard."""

    def test_pending_while_initializing(self):
        decision = evaluate(SessionStore(), "/dashboard")
        assert isinstance(decision, Pending)
        assert decision.outcome == GuardOutcome.PENDING

    def test_redirects_anonymous_to_sign_in(self, store):
        decision = evaluate(store, "/profile")

        assert isinstance(decision, Redirect)
        assert decision.to == SIGN_IN_PATH
        assert decision.remembered_from == "/profile"

    def test_renders_when_authenticated(self, store):
        store.login(make_account(), "tok")
        decision = evaluate(store, "/profile")

        assert isinstance(decision, Render)
        assert decision.destination == "/profile"

    def test_redirect_after_logout(self, store):
        store.login(make_account(), "tok")
        store.logout()
        assert isinstance(evaluate(store, "/dashboard"), Redirect)

    def test_resolve_public_paths_render(self):
        s = SessionStore()
        for path in ("/", "/login", "/register"):
            assert isinstance(resolve(s, path), Render)

    def test_resolve_unknown_path_goes_home(self, store):
        decision = resolve(store, "/nowhere")
        assert isinstance(decision, Redirect)
        assert decision.to == HOME_PATH
        assert decision.remembered_from is None

    def test_resolve_predict_path_is_guarded(self, store):
        decision = resolve(store, "/predict/diabetes")
        assert isinstance(decision, Redirect)
        assert decision.remembered_from == "/predict/diabetes"

    def test_post_login_destination(self):
        assert post_login_destination("/predictions") == "/predictions"
        assert post_login_destination(None) == DEFAULT_LANDING_PATH
        assert post_login_destination("/login") == DEFAULT_LANDING_PATH
        assert post_login_destination("/register") == DEFAULT_LANDING_PATH

    def test_predict_path_helpers(self):
        assert predict_path("thyroid") == "/predict/thyroid"
        assert parse_predict_path("/predict/thyroid") == "thyroid"
        assert parse_predict_path("/predict/") is None
        assert is_protected("/predict/anything") is True
        assert is_protected("/login") is False


# =============================================================================
# Validation Tests
# =============================================================================


class TestFormValidation:
    """Tests for client-side form validation."""

    def test_login_valid(self):
        validate_login_form("user@example.com", "password123")

    def test_login_invalid_email_and_short_password(self):
        with pytest.raises(ValidationError) as exc:
            validate_login_form("not-an-email", "123")

        assert exc.value.message == FORM_ERROR_MESSAGE
        assert set(exc.value.field_errors) == {"email", "password"}

    def test_login_missing_fields(self):
        with pytest.raises(ValidationError) as exc:
            validate_login_form("", "")
        assert exc.value.field_errors["email"] == "Email is required"
        assert exc.value.field_errors["password"] == "Password is required"

    def test_registration_valid(self):
        validate_registration_form("new@example.com", "Str0ng!pw", "Str0ng!pw")

    def test_registration_weak_password(self):
        with pytest.raises(ValidationError) as exc:
            validate_registration_form("new@example.com", "abc", "abc")
        assert "password" in exc.value.field_errors

    def test_registration_mismatch(self):
        with pytest.raises(ValidationError) as exc:
            validate_registration_form("new@example.com", "Str0ng!pw", "Str0ng!px")
        assert exc.value.field_errors == {"confirm_password": "Passwords do not match"}

    def test_profile_valid(self):
        values = validate_profile_form("28", 70.5, 175)
        assert values == {"age": 28, "weight": 70.5, "height": 175}

    def test_profile_required_and_range(self):
        with pytest.raises(ValidationError) as exc:
            validate_profile_form(None, 10, 175)

        assert exc.value.field_errors["age"] == "Age is required"
        assert "weight" in exc.value.field_errors
        assert "height" not in exc.value.field_errors

    def test_profile_age_bounds(self):
        with pytest.raises(ValidationError) as exc:
            validate_profile_form(12, 70, 175)
        assert exc.value.field_errors["age"] == "Please enter a valid age (13-120)"


class TestPasswordStrength:
    """Tests for password strength scoring."""

    def test_strong_password(self):
        strength = check_password_strength("Str0ng!pw")
        assert strength.score == 5
        assert strength.acceptable is True
        assert strength.feedback == []

    def test_weak_password(self):
        strength = check_password_strength("abc")
        assert strength.score == 1
        assert strength.acceptable is False
        assert "At least 8 characters" in strength.feedback

    def test_threshold_is_three(self):
        assert check_password_strength("abcdefgh1").acceptable is True
        assert check_password_strength("abcdefgh").acceptable is False


# =============================================================================
# Password Hashing and Token Tests
# =============================================================================


class TestPasswordHashing:
    """Tests for bcrypt password hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password("password123", rounds=4)
        assert hashed != "password123"
        assert verify_password("password123", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("")

    def test_verify_handles_garbage_hash(self):
        assert verify_password("password123", "not-a-hash") is False
        assert verify_password("", "whatever") is False


class TestTokens:
    """Tests for JWT issuance and verification."""

    def test_round_trip(self):
        token = create_access_token("user-1", secret_key="k")
        assert decode_token(token, secret_key="k") == "user-1"

    def test_wrong_key_rejected(self):
        token = create_access_token("user-1", secret_key="k")
        assert decode_token(token, secret_key="other") is None

    def test_expired_rejected(self):
        token = create_access_token("user-1", expires_delta=timedelta(seconds=-1), secret_key="k")
        assert decode_token(token, secret_key="k") is None

    def test_garbage_rejected(self):
        assert decode_token("not.a.jwt", secret_key="k") is None
