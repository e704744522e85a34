"""
Cache configuration settings
Centralized cache TTL values and the cache automation policy loaded at startup
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.config.constants import CacheView
from src.shared.utils import get_logger

logger = get_logger(__name__)


class CacheConfig:
    """Cache configuration with environment variable overrides"""

    # Default TTL values in seconds
    DEFAULT_TTL = int(os.getenv("CACHE_DEFAULT_TTL", "300"))  # 5 minutes

    # Optional capacity of the in-memory store, 0 (default) leaves it unbounded
    MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "0"))

    # Cache cleanup and maintenance
    CLEANUP_INTERVAL_MINUTES = int(
        os.getenv("CACHE_CLEANUP_INTERVAL", "5")
    )  # 5 minutes

    @classmethod
    def get_all_settings(cls) -> Dict[str, Any]:
        """Get all cache settings for debugging/monitoring"""
        return {
            "default_ttl": cls.DEFAULT_TTL,
            "max_entries": cls.MAX_ENTRIES,
            "cleanup_interval_minutes": cls.CLEANUP_INTERVAL_MINUTES,
        }


class CacheViewPolicy(BaseModel):
    """Caching rules for one catalog view"""

    name: CacheView
    ttl: int = Field(..., gt=0, description="Entry lifetime in seconds")
    refresh_interval: float = Field(
        0, ge=0, description="Seconds between background refreshes, 0 warms once"
    )

    model_config = ConfigDict(frozen=True)


class CacheAutomationPolicy(BaseModel):
    """Which catalog views are pre-warmed and how long their entries live"""

    views: List[CacheViewPolicy] = []

    model_config = ConfigDict(frozen=True)

    @field_validator("views")
    @classmethod
    def unique_view_names(cls, views: List[CacheViewPolicy]) -> List[CacheViewPolicy]:
        names = [view.name for view in views]
        if len(names) != len(set(names)):
            raise ValueError("Each cache view may only be configured once")
        return views

    def get_view(self, view: CacheView) -> Optional[CacheViewPolicy]:
        for view_policy in self.views:
            if view_policy.name == view:
                return view_policy
        return None

    def get_ttl(self, view: CacheView) -> int:
        """TTL for a view, falling back to the default when the view is not listed"""
        view_policy = self.get_view(view)
        return view_policy.ttl if view_policy else CacheConfig.DEFAULT_TTL


DEFAULT_CACHE_POLICY = CacheAutomationPolicy(
    views=[
        CacheViewPolicy(name=CacheView.ALL_PRODUCTS, ttl=CacheConfig.DEFAULT_TTL),
        CacheViewPolicy(name=CacheView.PRODUCT, ttl=CacheConfig.DEFAULT_TTL),
    ]
)


def load_cache_policy(
    raw_policy: Optional[str] = None, policy_file: Optional[str] = None
) -> CacheAutomationPolicy:
    """
    Build the cache automation policy from inline JSON or a JSON file.

    Inline JSON wins over the file. With neither configured the default policy
    warms the bulk and per-item product views once at startup.
    """
    if raw_policy:
        policy = CacheAutomationPolicy.model_validate(json.loads(raw_policy))
        logger.info(f"Loaded cache policy from environment: {len(policy.views)} views")
        return policy

    if policy_file:
        path = Path(policy_file)
        with path.open("r", encoding="utf-8") as handle:
            policy = CacheAutomationPolicy.model_validate(json.load(handle))
        logger.info(f"Loaded cache policy from {path}: {len(policy.views)} views")
        return policy

    logger.info("No cache policy configured, using default policy")
    return DEFAULT_CACHE_POLICY


# Global cache config instance
cache_config = CacheConfig()
