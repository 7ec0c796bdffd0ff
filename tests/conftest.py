"""Shared fixtures for the mdox test suite."""

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QSettings

from mdox.controllers.document_session_controller import DocumentSessionController
from mdox.controllers.linked_documents_controller import LinkedDocumentsController
from mdox.core.config_manager import ConfigManager
from mdox.core.recent_files import RecentFilesList
from mdox.core.scroll_sync import ScrollSyncCoordinator
from mdox.core.state_manager import StateManager
from tests.fakes import (
    FakeContentStore,
    FakeDiscoveryService,
    FakeRemoteFetchService,
    FakeRenderService,
    FakeUserPrompt,
)


@pytest.fixture
def settings(tmp_path):
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


@pytest.fixture
def config_manager(settings):
    return ConfigManager(settings)


@pytest.fixture
def state_manager():
    return StateManager()


@pytest.fixture
def content_store():
    return FakeContentStore(
        {
            "/docs/README.md": "# Readme\n\nSee [guide](guide.md).",
            "/docs/guide.md": "# Guide\n\n## Install Steps",
            "/docs/api/index.md": "# API",
        }
    )


@pytest.fixture
def render_service():
    return FakeRenderService()


@pytest.fixture
def remote_fetch_service():
    return FakeRemoteFetchService()


@pytest.fixture
def discovery_service():
    return FakeDiscoveryService()


@pytest.fixture
def user_prompt():
    return FakeUserPrompt()


@pytest.fixture
def linked_documents(discovery_service, state_manager):
    return LinkedDocumentsController(discovery_service, state_manager, max_depth=2, remote_delay=0)


@pytest.fixture
def session_controller(
    content_store,
    render_service,
    remote_fetch_service,
    linked_documents,
    user_prompt,
    config_manager,
    state_manager,
):
    return DocumentSessionController(
        content_store=content_store,
        render_service=render_service,
        remote_fetch_service=remote_fetch_service,
        linked_documents=linked_documents,
        user_prompt=user_prompt,
        config_manager=config_manager,
        state_manager=state_manager,
        recent_files=RecentFilesList(config_manager, capacity=3),
        scroll_sync=ScrollSyncCoordinator(suppression_window=0.1),
    )


@pytest.fixture(autouse=True)
def _qt_application(qapp):
    """Every controller is a QObject; make sure a Q(Core)Application exists."""
    return qapp
