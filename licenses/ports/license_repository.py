"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
import uuid

from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Lookups return ``None`` for unknown references; callers branch on it.
    """

    @abstractmethod
    async def create(self, license: License) -> License:
        """
        Persist a new license.

        Args:
            license: License entity to insert

        Returns:
            Stored license entity

        Raises:
            DuplicateLicenseError: If the key or order reference exists
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its license key.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_order_id(self, order_id: str) -> Optional[License]:
        """
        Find a license by payment provider order reference.

        Args:
            order_id: Order reference

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_subscription_id(self, subscription_id: str) -> Optional[License]:
        """
        Find a license by payment provider subscription reference.

        Args:
            subscription_id: Subscription reference

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def set_status(self, license_id: uuid.UUID, status: LicenseStatus) -> None:
        """
        Set a license's status.

        Args:
            license_id: License UUID
            status: New status
        """
        pass

    @abstractmethod
    async def set_expiry(self, license_id: uuid.UUID, expires_at: Optional[datetime]) -> None:
        """
        Set a license's expiry.

        Args:
            license_id: License UUID
            expires_at: New expiry, or None for no expiry
        """
        pass

    @abstractmethod
    async def search(self, query: str, limit: int = 50) -> List[License]:
        """
        Search licenses by key or email, newest first.

        Args:
            query: Case-insensitive substring of the key or email
            limit: Maximum number of results

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def list(self, limit: int = 100, offset: int = 0) -> List[License]:
        """
        List licenses, newest first.

        Args:
            limit: Maximum number of results
            offset: Number of licenses to skip

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def find_lapsed(self, current_time: datetime) -> List[License]:
        """
        Find active licenses whose expiry has passed.

        Args:
            current_time: Reference time

        Returns:
            List of License entities
        """
        pass
