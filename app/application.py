"""
Client composition root.

Wires one SessionStore, Notifier and HealthService together from
AppConfig and hands out the per-screen pieces built on them:

    health_app = HealthApp.from_config(load_config())
    health_app.start()
    decision = health_app.open("/predict/diabetes")
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from app.catalog import AssessmentType
from app.config import AppConfig
from app.eligibility import (
    PROFILE_INCOMPLETE_NOTICE,
    UNKNOWN_ASSESSMENT_NOTICE,
    Navigate,
    select_assessment,
)
from app.errors import ProfileIncompleteError, UnknownAssessmentTypeError
from app.notifications import Notifier
from app.remote.base import HealthService
from app.remote.factory import ServiceFactory
from app.services.account import AccountService
from app.workflow import AssessmentWorkflow
from auth.guard import PREDICTIONS_PATH, PROFILE_PATH, GuardDecision, resolve
from auth.store import SessionStore

_logger = logging.getLogger(__name__)


class HealthApp:
    """Owns the session store and the collaborators every screen shares."""

    def __init__(
        self,
        service: HealthService,
        store: Optional[SessionStore] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.service = service
        self.store = store or SessionStore()
        self.notifier = notifier or Notifier()
        self.accounts = AccountService(self.store, self.service, self.notifier)

    @classmethod
    def from_config(cls, config: AppConfig) -> "HealthApp":
        """Build from configuration; the mock backend needs no network."""
        if config.service_backend == "mock":
            service = ServiceFactory.get_service("mock")
        else:
            service = ServiceFactory.get_service(
                config.service_backend,
                base_url=config.api_base_url,
                timeout=float(config.api_timeout_seconds),
            )

        storage = None
        if config.persist_session:
            from persistence.sessions import SqliteSessionStorage

            storage = SqliteSessionStorage(db_path=config.db_path)

        _logger.info(
            f"Client using {service.source_name} service "
            f"(persist_session={config.persist_session})"
        )
        return cls(service=service, store=SessionStore(storage=storage))

    def start(self) -> None:
        """Run the one-time startup session check."""
        self.store.initialize()

    def open(self, destination: str) -> GuardDecision:
        """Guard decision for navigating to `destination`."""
        return resolve(self.store, destination)

    def select_assessment(self, assessment_type: Union[str, AssessmentType]) -> Navigate:
        """Where a click on an assessment card leads, with any notice shown."""
        navigation = select_assessment(self.store.account, assessment_type)
        if navigation.notice:
            self.notifier.error(navigation.notice)
        return navigation

    def open_assessment(
        self, assessment_type: Union[str, AssessmentType]
    ) -> Union[AssessmentWorkflow, Navigate]:
        """
        Start a workflow for the assessment screen.

        Returns a Navigate instead when the type is unknown (back to the
        assessment list) or the profile is incomplete (to the profile
        screen). The workflow has already recorded the notification.
        """
        workflow = AssessmentWorkflow(self.store, self.service, self.notifier)
        try:
            workflow.initialize(assessment_type)
        except UnknownAssessmentTypeError:
            return Navigate(to=PREDICTIONS_PATH, notice=UNKNOWN_ASSESSMENT_NOTICE)
        except ProfileIncompleteError:
            return Navigate(to=PROFILE_PATH, notice=PROFILE_INCOMPLETE_NOTICE)
        return workflow
