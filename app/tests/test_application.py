# app/tests/test_application.py
"""Tests for the HealthApp composition root."""
import asyncio

import pytest

from app.application import HealthApp
from app.config import AppConfig
from app.eligibility import PROFILE_INCOMPLETE_NOTICE, Navigate
from app.notifications import NotificationLevel
from app.remote.http import HttpHealthService
from app.remote.mock import MockHealthService
from app.remote.mock_backend import DEMO_EMAIL, DEMO_PASSWORD
from app.workflow import AssessmentWorkflow, WorkflowPhase
from auth.guard import Pending, Redirect, Render
from persistence.db import close_db, init_db, reset_db
from persistence.sessions import SqliteSessionStorage


@pytest.fixture
def health_app(service):
    return HealthApp(service=service)


class TestFromConfig:
    def test_http_backend(self):
        health_app = HealthApp.from_config(
            AppConfig(api_base_url="http://api.test/api", api_timeout_seconds=3)
        )

        assert isinstance(health_app.service, HttpHealthService)
        assert health_app.service.base_url == "http://api.test/api"
        assert health_app.service.timeout == 3.0

    def test_mock_backend(self):
        health_app = HealthApp.from_config(AppConfig(service_backend="mock"))
        assert isinstance(health_app.service, MockHealthService)

    def test_persisted_session(self, tmp_path):
        config = AppConfig(
            service_backend="mock", persist_session=True, db_path=tmp_path / "session.db"
        )
        try:
            first = HealthApp.from_config(config)
            first.start()
            asyncio.run(first.accounts.login(DEMO_EMAIL, DEMO_PASSWORD))

            second = HealthApp.from_config(config)
            second.start()

            assert second.store.is_authenticated is True
            assert second.store.account.email == DEMO_EMAIL
            assert second.store.is_profile_complete() is True
        finally:
            close_db()

    def test_persisted_session_uses_configured_path(self, tmp_path):
        db_file = tmp_path / "nested" / "mine.db"
        reset_db()
        init_db()
        try:
            health_app = HealthApp.from_config(
                AppConfig(service_backend="mock", persist_session=True, db_path=db_file)
            )
            health_app.start()
            asyncio.run(health_app.accounts.login(DEMO_EMAIL, DEMO_PASSWORD))

            assert db_file.exists()
            assert SqliteSessionStorage(db_path=db_file).load()[1].email == DEMO_EMAIL
            assert SqliteSessionStorage().load() is None
        finally:
            close_db()
            reset_db()


class TestNavigation:
    """Guard decisions through the app."""

    def test_pending_before_start(self, health_app):
        assert isinstance(health_app.open("/dashboard"), Pending)

    def test_redirect_then_render_after_login(self, health_app):
        health_app.start()

        decision = health_app.open("/predict/diabetes")
        assert isinstance(decision, Redirect)

        destination = asyncio.run(
            health_app.accounts.login(
                DEMO_EMAIL, DEMO_PASSWORD, remembered_from=decision.remembered_from
            )
        )

        assert destination == "/predict/diabetes"
        assert isinstance(health_app.open(destination), Render)

    def test_logout_redirects(self, health_app):
        health_app.start()
        asyncio.run(health_app.accounts.login(DEMO_EMAIL, DEMO_PASSWORD))
        health_app.accounts.logout()

        assert isinstance(health_app.open("/profile"), Redirect)


class TestAssessments:
    """Assessment selection and workflow creation."""

    def test_open_assessment_with_complete_profile(self, health_app):
        health_app.start()
        asyncio.run(health_app.accounts.login(DEMO_EMAIL, DEMO_PASSWORD))

        workflow = health_app.open_assessment("heart_disease")

        assert isinstance(workflow, AssessmentWorkflow)
        assert workflow.phase == WorkflowPhase.FORM

    def test_fresh_registration_is_sent_to_profile(self, health_app):
        health_app.start()
        asyncio.run(health_app.accounts.register("fresh@example.com", "Str0ng!pw", "Str0ng!pw"))
        asyncio.run(health_app.accounts.login("fresh@example.com", "Str0ng!pw"))

        selection = health_app.select_assessment("diabetes")
        opened = health_app.open_assessment("diabetes")

        assert selection == Navigate(to="/profile", notice=PROFILE_INCOMPLETE_NOTICE)
        assert isinstance(opened, Navigate)
        assert opened.to == "/profile"

    def test_profile_gate_notice_matches_notification(self, health_app):
        health_app.start()
        asyncio.run(health_app.accounts.register("gate@example.com", "Str0ng!pw", "Str0ng!pw"))
        asyncio.run(health_app.accounts.login("gate@example.com", "Str0ng!pw"))
        health_app.notifier.clear()

        opened = health_app.open_assessment("thyroid")
        shown = health_app.notifier.items(NotificationLevel.ERROR)

        assert [n.message for n in shown] == [opened.notice]
        assert opened.notice == PROFILE_INCOMPLETE_NOTICE

    def test_unknown_assessment_notice_matches_notification(self, health_app):
        health_app.start()
        asyncio.run(health_app.accounts.login(DEMO_EMAIL, DEMO_PASSWORD))
        health_app.notifier.clear()

        opened = health_app.open_assessment("cancer")
        shown = health_app.notifier.items(NotificationLevel.ERROR)

        assert [n.message for n in shown] == [opened.notice]

    def test_unknown_assessment(self, health_app):
        health_app.start()
        asyncio.run(health_app.accounts.login(DEMO_EMAIL, DEMO_PASSWORD))

        opened = health_app.open_assessment("cancer")

        assert isinstance(opened, Navigate)
        assert opened.to == "/predictions"
        assert health_app.notifier.items(NotificationLevel.ERROR)[-1].message == "Invalid disease type"

    def test_end_to_end_prediction(self, health_app):
        health_app.start()
        asyncio.run(health_app.accounts.login(DEMO_EMAIL, DEMO_PASSWORD))

        workflow = health_app.open_assessment("diabetes")
        workflow.set_answer("frequent_urination", 70)
        workflow.set_answer("excessive_thirst", 50)
        result = asyncio.run(workflow.submit())
        history = asyncio.run(health_app.accounts.load_history())

        assert workflow.phase == WorkflowPhase.RESULT
        assert history[0].entry.percentage == result.percentage
