from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.use_cases.quote_lines.row_table import RowTable
from tests.fakes import ManualTaskScheduler, RecordingNotificationService


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def notifications():
    return RecordingNotificationService()


@pytest.fixture
def scheduler():
    return ManualTaskScheduler()


@pytest.fixture
def table(notifications):
    return RowTable(notifications)
