"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import transaction
from django.utils import timezone

from activations.domain.activation import Activation, ActivationOutcome
from activations.infrastructure.models import Activation as ActivationModel
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import LicenseNotFoundError, LicenseRevokedError
from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel


class DjangoActivationRepository(ActivationRepository):
    """
    Django ORM implementation of ActivationRepository.

    The capacity check in ``try_activate`` runs inside a transaction that
    first locks the license row, which serialises activations per license.
    """

    def _to_domain(self, model: ActivationModel) -> Activation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Activation model

        Returns:
            Activation domain entity
        """
        return Activation(
            id=model.id,
            license_id=model.license_id,
            device_id=model.device_id,
            device_name=model.device_name,
            activated_at=model.activated_at,
        )

    @sync_to_async
    def list_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        """
        List a license's activations, most recent first.

        Args:
            license_id: License UUID

        Returns:
            List of Activation entities
        """
        models = ActivationModel.objects.filter(license_id=license_id).order_by("-activated_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def count_by_license(self, license_id: uuid.UUID) -> int:
        return ActivationModel.objects.filter(license_id=license_id).count()

    @sync_to_async
    def find(self, license_id: uuid.UUID, device_id: str) -> Optional[Activation]:
        """
        Find the activation of a device on a license.

        Args:
            license_id: License UUID
            device_id: Device identifier

        Returns:
            Activation entity or None if the device holds no slot
        """
        try:
            model = ActivationModel.objects.get(license_id=license_id, device_id=device_id)
            return self._to_domain(model)
        except ActivationModel.DoesNotExist:
            return None

    @sync_to_async
    def try_activate(
        self, license: License, device_id: str, device_name: Optional[str] = None
    ) -> ActivationOutcome:
        """
        Activate a device on a license if a slot is available.

        Args:
            license: License entity
            device_id: Device identifier
            device_name: Optional display name of the device

        Returns:
            ActivationOutcome describing the result

        Raises:
            LicenseNotFoundError: If the license row no longer exists
            LicenseRevokedError: If the license was revoked meanwhile
        """
        with transaction.atomic():
            try:
                license_row = (
                    LicenseModel.objects.select_for_update()
                    .only("id", "max_activations", "status")
                    .get(id=license.id)
                )
            except LicenseModel.DoesNotExist as e:
                raise LicenseNotFoundError() from e

            # A revoke may have landed since the caller validated the license
            if license_row.status == LicenseStatus.REVOKED.value:
                raise LicenseRevokedError()

            max_activations = license_row.max_activations
            activations = ActivationModel.objects.filter(license_id=license.id)

            refresh = {"activated_at": timezone.now()}
            if device_name:
                refresh["device_name"] = device_name
            if activations.filter(device_id=device_id).update(**refresh):
                return ActivationOutcome(
                    activated=True,
                    already_activated=True,
                    count=activations.count(),
                    max_activations=max_activations,
                )

            count = activations.count()
            if count >= max_activations:
                return ActivationOutcome(
                    activated=False,
                    already_activated=False,
                    count=count,
                    max_activations=max_activations,
                )

            ActivationModel.objects.create(
                license_id=license.id,
                device_id=device_id,
                device_name=device_name,
            )
            return ActivationOutcome(
                activated=True,
                already_activated=False,
                count=count + 1,
                max_activations=max_activations,
            )

    @sync_to_async
    def deactivate(self, license_id: uuid.UUID, device_id: str) -> bool:
        """
        Remove a device's activation. Unknown devices are a no-op.

        Args:
            license_id: License UUID
            device_id: Device identifier

        Returns:
            True if an activation was removed
        """
        deleted, _ = ActivationModel.objects.filter(
            license_id=license_id, device_id=device_id
        ).delete()
        return deleted > 0

    @sync_to_async
    def revoke_all(self, license_id: uuid.UUID) -> int:
        """
        Remove every activation of a license.

        Args:
            license_id: License UUID

        Returns:
            Number of activations removed
        """
        with transaction.atomic():
            # Same lock as try_activate, so no insert slips past the delete
            list(LicenseModel.objects.select_for_update().filter(id=license_id).values_list("id"))
            deleted, _ = ActivationModel.objects.filter(license_id=license_id).delete()
        return deleted
