"""
Integration tests for repository implementations.
"""

import uuid
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync

from core.domain.exceptions import DuplicateLicenseError, LicenseRevokedError
from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.license import License
from webhooks.infrastructure.models import WebhookEvent as WebhookEventModel


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseRepository:
    """Integration tests for LicenseRepository."""

    def test_create_and_find(self, license_repository, sample_license):
        """Test saving and finding a license by id and key."""
        saved = async_to_sync(license_repository.create)(sample_license)

        found = async_to_sync(license_repository.find_by_id)(saved.id)
        assert found is not None
        assert found.license_key == sample_license.license_key
        assert found.tier == LicenseTier.PRO
        assert found.status == LicenseStatus.ACTIVE

        by_key = async_to_sync(license_repository.find_by_key)(sample_license.license_key)
        assert by_key.id == saved.id

    def test_find_not_found(self, license_repository):
        """Test finding non-existent licenses."""
        assert async_to_sync(license_repository.find_by_id)(uuid.uuid4()) is None
        assert async_to_sync(license_repository.find_by_key)("PRO-NOPE") is None

    def test_duplicate_key_conflicts(self, license_repository, db_license):
        """Test a second license with the same key is refused."""
        duplicate = License.create(license_key=db_license.license_key, tier=LicenseTier.PRO)
        with pytest.raises(DuplicateLicenseError):
            async_to_sync(license_repository.create)(duplicate)

    def test_duplicate_order_conflicts(self, license_repository, make_license):
        """Test one order yields at most one license."""
        make_license(order_id="order-1")
        with pytest.raises(DuplicateLicenseError):
            make_license(order_id="order-1")

    def test_find_by_references(self, license_repository, make_license):
        """Test lookups by order and subscription."""
        order_license = make_license(order_id="order-9")
        sub_license = make_license(subscription_id="sub-9")

        assert async_to_sync(license_repository.find_by_order_id)("order-9").id == order_license.id
        assert (
            async_to_sync(license_repository.find_by_subscription_id)("sub-9").id == sub_license.id
        )
        assert async_to_sync(license_repository.find_by_subscription_id)("sub-x") is None

    def test_set_status_and_expiry(self, license_repository, db_license, future):
        """Test partial updates."""
        async_to_sync(license_repository.set_status)(db_license.id, LicenseStatus.EXPIRED)
        async_to_sync(license_repository.set_expiry)(db_license.id, future)

        found = async_to_sync(license_repository.find_by_id)(db_license.id)
        assert found.status == LicenseStatus.EXPIRED
        assert found.expires_at == future

    def test_search(self, license_repository, make_license):
        """Test search by key fragment and email."""
        alice = make_license(email="alice@example.com")
        make_license(email="bob@example.com")

        by_email = async_to_sync(license_repository.search)("ALICE")
        assert [license.id for license in by_email] == [alice.id]

        by_key = async_to_sync(license_repository.search)(alice.license_key[4:9])
        assert alice.id in [license.id for license in by_key]

    def test_list_paging(self, license_repository, make_license):
        """Test list honours limit and offset."""
        for _ in range(3):
            make_license()

        assert len(async_to_sync(license_repository.list)(limit=2)) == 2
        assert len(async_to_sync(license_repository.list)(limit=2, offset=2)) == 1

    def test_find_lapsed(self, license_repository, make_license, past, future):
        """Test only active licenses past their expiry are lapsed."""
        lapsed = make_license(expires_at=past)
        make_license(expires_at=future)
        make_license()
        revoked = make_license(expires_at=past)
        async_to_sync(license_repository.set_status)(revoked.id, LicenseStatus.REVOKED)

        found = async_to_sync(license_repository.find_lapsed)(past + timedelta(hours=1))
        assert [license.id for license in found] == [lapsed.id]


@pytest.mark.django_db
@pytest.mark.integration
class TestActivationRepository:
    """Integration tests for ActivationRepository."""

    def test_activate_new_device(self, activation_repository, db_license, activate):
        """Test a first activation takes a slot."""
        outcome = activate(db_license, "device-1", "Laptop")

        assert outcome.activated is True
        assert outcome.already_activated is False
        assert outcome.count == 1
        assert outcome.max_activations == 3

        activation = async_to_sync(activation_repository.find)(db_license.id, "device-1")
        assert activation.device_name == "Laptop"

    def test_reactivation_keeps_count(self, activation_repository, db_license, activate):
        """Test re-activating refreshes the row without using a slot."""
        first = activate(db_license, "device-1")
        before = async_to_sync(activation_repository.find)(db_license.id, "device-1")

        again = activate(db_license, "device-1", "Renamed")

        assert again.already_activated is True
        assert again.count == first.count == 1
        after = async_to_sync(activation_repository.find)(db_license.id, "device-1")
        assert after.activated_at >= before.activated_at
        assert after.device_name == "Renamed"

    def test_limit_reached(self, activation_repository, db_license, activate):
        """Test the fourth device on a three slot license is refused."""
        for device in ("a", "b", "c"):
            assert activate(db_license, device).activated

        outcome = activate(db_license, "d")

        assert outcome.limit_reached is True
        assert outcome.count == 3
        assert outcome.max_activations == 3
        assert async_to_sync(activation_repository.count_by_license)(db_license.id) == 3

    def test_full_license_still_refreshes_existing_device(self, db_license, activate):
        """Test a device holding a slot can re-activate when the license is full."""
        for device in ("a", "b", "c"):
            activate(db_license, device)

        assert activate(db_license, "b").activated is True

    def test_revoked_license_refuses_activation(
        self, license_repository, db_license, activate
    ):
        """Test the row lock re-checks revocation."""
        async_to_sync(license_repository.set_status)(db_license.id, LicenseStatus.REVOKED)
        with pytest.raises(LicenseRevokedError):
            activate(db_license, "device-1")

    def test_deactivate(self, activation_repository, db_license, activate):
        """Test deactivation frees the slot and is idempotent."""
        activate(db_license, "device-1")

        assert async_to_sync(activation_repository.deactivate)(db_license.id, "device-1") is True
        assert async_to_sync(activation_repository.deactivate)(db_license.id, "device-1") is False
        assert async_to_sync(activation_repository.count_by_license)(db_license.id) == 0

    def test_revoke_all(self, activation_repository, db_license, activate):
        """Test every activation of a license is removed."""
        activate(db_license, "a")
        activate(db_license, "b")

        assert async_to_sync(activation_repository.revoke_all)(db_license.id) == 2
        assert async_to_sync(activation_repository.list_by_license)(db_license.id) == []


@pytest.mark.django_db
@pytest.mark.integration
class TestWebhookEventRepository:
    """Integration tests for WebhookEventRepository."""

    def test_claim_once(self, webhook_event_repository):
        """Test a key can be claimed exactly once."""
        assert async_to_sync(webhook_event_repository.claim)("order_created-1", "order_created")
        assert not async_to_sync(webhook_event_repository.claim)("order_created-1", "order_created")
        assert WebhookEventModel.objects.filter(event_id="order_created-1").exists()

    def test_release(self, webhook_event_repository):
        """Test a released key can be claimed again."""
        async_to_sync(webhook_event_repository.claim)("evt-1", "order_created")
        async_to_sync(webhook_event_repository.release)("evt-1")

        assert not WebhookEventModel.objects.filter(event_id="evt-1").exists()
        assert async_to_sync(webhook_event_repository.claim)("evt-1", "order_created")
