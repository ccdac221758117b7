"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from datetime import datetime
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from core.domain.exceptions import DuplicateLicenseError
from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            license_key=model.license_key,
            tier=LicenseTier(model.tier),
            status=LicenseStatus(model.status),
            max_activations=model.max_activations,
            expires_at=model.expires_at,
            email=model.email,
            customer_id=model.customer_id,
            order_id=model.order_id,
            subscription_id=model.subscription_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, license: License) -> LicenseModel:
        """
        Convert domain entity to an unsaved Django model.

        Args:
            license: License domain entity

        Returns:
            Django License model
        """
        return LicenseModel(
            id=license.id,
            license_key=license.license_key,
            tier=license.tier.value,
            status=license.status.value,
            email=license.email,
            customer_id=license.customer_id,
            order_id=license.order_id,
            subscription_id=license.subscription_id,
            max_activations=license.max_activations,
            expires_at=license.expires_at,
        )

    def _find_one(self, **lookup) -> Optional[License]:
        try:
            return self._to_domain(LicenseModel.objects.get(**lookup))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    def create(self, license: License) -> License:
        """
        Persist a new license.

        Args:
            license: License entity to insert

        Returns:
            Stored license entity

        Raises:
            DuplicateLicenseError: If the key or order reference exists
        """
        model = self._to_model(license)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError as e:
            raise DuplicateLicenseError(
                f"License with key {license.license_key} or order "
                f"{license.order_id} already exists"
            ) from e
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        return self._find_one(id=license_id)

    @sync_to_async
    def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its license key.

        Args:
            license_key: License key string

        Returns:
            License entity or None if not found
        """
        return self._find_one(license_key=license_key)

    @sync_to_async
    def find_by_order_id(self, order_id: str) -> Optional[License]:
        return self._find_one(order_id=order_id)

    @sync_to_async
    def find_by_subscription_id(self, subscription_id: str) -> Optional[License]:
        # Not unique; a resubscription keeps the reference, newest wins
        model = LicenseModel.objects.filter(subscription_id=subscription_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def set_status(self, license_id: uuid.UUID, status: LicenseStatus) -> None:
        """
        Set a license's status.

        Args:
            license_id: License UUID
            status: New status
        """
        LicenseModel.objects.filter(id=license_id).update(
            status=status.value, updated_at=timezone.now()
        )

    @sync_to_async
    def set_expiry(self, license_id: uuid.UUID, expires_at: Optional[datetime]) -> None:
        """
        Set a license's expiry.

        Args:
            license_id: License UUID
            expires_at: New expiry, or None for no expiry
        """
        LicenseModel.objects.filter(id=license_id).update(
            expires_at=expires_at, updated_at=timezone.now()
        )

    @sync_to_async
    def search(self, query: str, limit: int = 50) -> List[License]:
        """
        Search licenses by key or email, newest first.

        Args:
            query: Case-insensitive substring of the key or email
            limit: Maximum number of results

        Returns:
            List of License entities
        """
        models = LicenseModel.objects.filter(
            Q(license_key__icontains=query) | Q(email__icontains=query)
        ).order_by("-created_at")[:limit]
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def list(self, limit: int = 100, offset: int = 0) -> List[License]:
        """
        List licenses, newest first.

        Args:
            limit: Maximum number of results
            offset: Number of licenses to skip

        Returns:
            List of License entities
        """
        models = LicenseModel.objects.order_by("-created_at")[offset : offset + limit]
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def find_lapsed(self, current_time: datetime) -> List[License]:
        models = LicenseModel.objects.filter(
            status=LicenseStatus.ACTIVE.value,
            expires_at__isnull=False,
            expires_at__lt=current_time,
        )
        return [self._to_domain(model) for model in models]
