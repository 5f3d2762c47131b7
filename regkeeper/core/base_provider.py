# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
RegKeeper Base Provider

Providers perform the actual reads of a registry store. The core only
calls them synchronously and never retries; retries, timeouts and access
masks belong to the provider.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .paths import KeyPath

logger = logging.getLogger("regkeeper.providers")


class RegistryProvider(ABC):
    """
    Base class for all registry providers.

    Subclasses implement list_value_names() and raise ProviderError when the
    store cannot be read.
    """

    def __init__(self, provider_name: Optional[str] = None):
        self.provider_name = provider_name or self.__class__.__name__
        self.logger = logging.getLogger(f"regkeeper.providers.{self.provider_name}")

    @abstractmethod
    def list_value_names(self, key: KeyPath) -> List[str]:
        """
        List value names currently present under `key`.

        Args:
            key: Key to read, opened with key.access

        Returns:
            Value names as stored (case preserved); '' is the default value

        Raises:
            ProviderError: If the store cannot be read
        """

    def log_execution(self, method: str, key: KeyPath):
        self.logger.debug(f"Executing {self.provider_name}.{method} on {key}")

    def log_success(self, method: str, key: KeyPath, count: int):
        self.logger.debug(
            f"{self.provider_name}.{method} on {key} returned {count} entries"
        )

    def log_error(self, method: str, error: Exception):
        self.logger.error(f"{self.provider_name}.{method} failed: {error}")
