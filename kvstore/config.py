"""Declarative store configuration loaded from YAML."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from kvstore.cache.memory_cache import MemoryCache
from kvstore.decorators.cached import CachedStore
from kvstore.decorators.countable import CountableDecorator
from kvstore.decorators.sortable import SortableDecorator
from kvstore.errors import ConfigurationError
from kvstore.storage import create_store
from kvstore.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class StoreConfig(BaseModel):
    backend: Literal[
        "memory", "serializing_memory", "null", "json_file", "directory", "sqlite", "redis"
    ] = "memory"
    path: Optional[str] = None
    table_name: str = "store"
    serializer: Literal["pickle", "json", "yaml", "encrypted"] = "pickle"
    password: Optional[str] = None
    countable: bool = False
    sortable: bool = False
    # None disables caching; 0 caches without expiry
    cache_ttl: Optional[float] = None
    log_level: Optional[str] = None

    @field_validator("cache_ttl")
    @classmethod
    def _non_negative_ttl(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError("cache_ttl must not be negative")
        return value


def load_config(path: Union[str, Path]) -> StoreConfig:
    """Read a StoreConfig from a YAML file. A missing file yields defaults."""
    cfg_path = Path(path)
    if not cfg_path.exists():
        logger.debug("No store config at %s, using defaults", cfg_path)
        return StoreConfig()
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Could not read store config {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Store config {cfg_path} must be a mapping")
    try:
        return StoreConfig(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid store config {cfg_path}: {exc}") from exc


def build_store(config: StoreConfig) -> KeyValueStore:
    """Create the configured backend and wrap it in the requested decorators."""
    options = {}
    if config.backend == "sqlite":
        options["table_name"] = config.table_name
    try:
        store = create_store(
            config.backend,
            config.serializer,
            path=config.path,
            password=config.password,
            **options,
        )
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    if config.countable:
        store = CountableDecorator(store)
    if config.sortable:
        store = SortableDecorator(store)
    if config.cache_ttl is not None:
        store = CachedStore.for_cache(store, MemoryCache(), config.cache_ttl)
    logger.info("Built %s store: %r", config.backend, store)
    return store
