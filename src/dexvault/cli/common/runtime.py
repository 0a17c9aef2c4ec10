"""Command runtime: settings, logging and the service container."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dependency_injector import providers

from dexvault.cli.common.context import CliContext
from dexvault.config import load_settings
from dexvault.containers import Container
from dexvault.services import DexSession
from dexvault.shared.logging import setup_structured_logger

logger = logging.getLogger(__name__)


def build_container(context: CliContext) -> Container:
    """Load settings, configure logging and return a wired container.

    Raises:
        ApplicationError: If the configuration cannot be loaded
    """
    settings = load_settings(context.config_path)
    setup_structured_logger(
        level=context.get_effective_log_level(settings.logging.level),
        log_file=settings.logging.file or None,
        use_rich_console=settings.logging.console_output,
    )

    container = Container()
    container.config.override(providers.Object(settings))
    logger.debug("Container ready (base url %s)", settings.api.pokeapi.base_url)
    return container


@asynccontextmanager
async def open_session(container: Container) -> AsyncIterator[DexSession]:
    """Yield the container's session and release its resources afterwards."""
    session = container.session()
    try:
        yield session
    finally:
        await session.aclose()
