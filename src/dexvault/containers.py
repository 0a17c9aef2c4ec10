"""Dependency Injection container for DexVault.

This module is the composition root: every long-lived service is built
here from the settings, once per container.

The container manages:
- Settings (Singleton)
- HTTP transport and the request throttle
- PokeAPI client
- Record cache and durable storage
- Name index, fuzzy matcher and data service
- Session controller
"""

from __future__ import annotations

from dependency_injector import containers, providers

from dexvault.config.loader import load_settings
from dexvault.core.matching import FuzzyMatcher
from dexvault.services import (
    DataService,
    DexSession,
    HttpFetcher,
    LocalStorage,
    NameIndex,
    PokeAPIClient,
    RecordCache,
    RequestThrottle,
)


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for DexVault services.

    Example:
        >>> container = Container()
        >>> container.config.override(providers.Object(Settings()))
        >>> session = container.session()
        >>> await session.load()
    """

    # Configuration
    config = providers.Singleton(load_settings)

    # Transport
    http_fetcher = providers.Singleton(
        HttpFetcher,
        timeout=providers.Callable(lambda config: config.api.pokeapi.timeout, config=config),
        connect_timeout=providers.Callable(
            lambda config: config.api.pokeapi.connect_timeout,
            config=config,
        ),
        user_agent=providers.Callable(lambda config: config.api.pokeapi.user_agent, config=config),
    )

    request_throttle = providers.Singleton(
        RequestThrottle,
        fetcher=http_fetcher,
        min_interval=providers.Callable(
            lambda config: config.api.pokeapi.min_request_interval,
            config=config,
        ),
    )

    pokeapi_client = providers.Singleton(
        PokeAPIClient,
        throttle=request_throttle,
        base_url=providers.Callable(lambda config: config.api.pokeapi.base_url, config=config),
    )

    # Caching and persistence
    record_cache = providers.Singleton(
        RecordCache,
        max_size=providers.Callable(lambda config: config.cache.max_size, config=config),
        ttl=providers.Callable(lambda config: config.cache.ttl, config=config),
    )

    local_storage = providers.Singleton(
        LocalStorage,
        directory=providers.Callable(lambda config: config.storage.directory, config=config),
    )

    name_index = providers.Singleton(
        NameIndex,
        client=pokeapi_client,
        storage=local_storage,
        page_size=providers.Callable(lambda config: config.api.pokeapi.page_size, config=config),
        ttl=providers.Callable(lambda config: config.storage.name_list_ttl, config=config),
        list_key=providers.Callable(lambda config: config.storage.name_list_key, config=config),
        ts_key=providers.Callable(lambda config: config.storage.name_list_ts_key, config=config),
    )

    # Search and resolution
    fuzzy_matcher = providers.Singleton(
        FuzzyMatcher,
        max_results=providers.Callable(lambda config: config.search.max_results, config=config),
    )

    data_service = providers.Singleton(
        DataService,
        client=pokeapi_client,
        cache=record_cache,
        name_index=name_index,
        dedupe_inflight=providers.Callable(
            lambda config: config.cache.dedupe_inflight,
            config=config,
        ),
    )

    session = providers.Singleton(
        DexSession,
        data_service=data_service,
        name_index=name_index,
        matcher=fuzzy_matcher,
        debounce=providers.Callable(lambda config: config.search.debounce, config=config),
        suggestion_limit=providers.Callable(
            lambda config: config.search.suggestion_limit,
            config=config,
        ),
        max_preload=providers.Callable(lambda config: config.app.max_preload, config=config),
        default_id=providers.Callable(lambda config: config.app.default_id, config=config),
        throttle=request_throttle,
        fetcher=http_fetcher,
    )
