"""Unit tests for the logging bootstrap."""

from __future__ import annotations

import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest
import structlog

from teamtasks.bootstrap.container import get_container, reset_container
from teamtasks.bootstrap.logging import configure_logging, reset_logging


@pytest.fixture(autouse=True)
def fresh_logging() -> Iterator[None]:
    reset_logging()
    reset_container()
    yield
    reset_logging()
    reset_container()


def _renderer() -> object:
    return structlog.get_config()["processors"][-1]


class TestConfigureLogging:
    def test_environment_from_variable(self) -> None:
        with patch.dict(os.environ, {"ENVIRONMENT": "development"}, clear=False):
            environment = configure_logging()

        assert environment == "development"
        assert isinstance(_renderer(), structlog.dev.ConsoleRenderer)

    def test_defaults_to_production(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            environment = configure_logging()

        assert environment == "production"
        assert isinstance(_renderer(), structlog.processors.JSONRenderer)

    def test_configures_only_once(self) -> None:
        configure_logging("development")

        assert configure_logging("production") == "development"
        assert isinstance(_renderer(), structlog.dev.ConsoleRenderer)

    def test_force_reconfigures(self) -> None:
        configure_logging("development")

        assert configure_logging("production", force=True) == "production"
        assert isinstance(_renderer(), structlog.processors.JSONRenderer)


class TestContainerConfiguresLogging:
    @pytest.mark.asyncio
    async def test_first_container_request_configures_logging(self) -> None:
        with patch(
            "teamtasks.bootstrap.container.configure_logging", wraps=configure_logging
        ) as spy:
            await get_container()
            await get_container()

        spy.assert_called_once_with()
