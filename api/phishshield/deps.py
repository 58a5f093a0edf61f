"""Shared dependencies: settings and the heuristics tables, built once."""

from functools import lru_cache

from .config import HeuristicsConfig, Settings, load_heuristics_config, load_settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_heuristics_config() -> HeuristicsConfig:
    return load_heuristics_config(get_settings())
