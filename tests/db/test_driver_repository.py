"""Tests for driver repository updates and derived verification flags."""

import pytest

from db.repositories import DriverRepository
from db.transaction import unit_of_work
from rides.driver import DOCUMENT_FIELDS, DriverCreate, DriverPatch, KycStatus, ManualReviewStatus

ALL_DOCUMENTS = {field: f"https://docs.example.com/{field}.pdf" for field in DOCUMENT_FIELDS}


def _create_driver(session_factory, **fields) -> int:
    with unit_of_work(session_factory) as session:
        return DriverRepository(session).create(DriverCreate(user_id=fields.pop("user_id", 1), **fields)).id


def _update(session_factory, driver_id, patch):
    with unit_of_work(session_factory) as session:
        return DriverRepository(session).update(driver_id, patch)


def _approve(session_factory, driver_id):
    with unit_of_work(session_factory) as session:
        return DriverRepository(session).set_kyc_status(driver_id, KycStatus.APPROVED)


@pytest.mark.unit
class TestDriverRepository:
    def test_create_defaults(self, session_factory):
        driver_id = _create_driver(session_factory)
        with session_factory() as session:
            driver = DriverRepository(session).get(driver_id)
        assert driver is not None
        assert driver.kyc_status == KycStatus.PENDING
        assert driver.manual_kyc_status == ManualReviewStatus.NONE
        assert driver.documents_uploaded is False

    def test_create_with_all_documents(self, session_factory):
        driver_id = _create_driver(session_factory, **ALL_DOCUMENTS)
        with session_factory() as session:
            assert DriverRepository(session).get(driver_id).documents_uploaded is True

    def test_list_online(self, session_factory):
        online = _create_driver(session_factory, user_id=1, is_online=True)
        _create_driver(session_factory, user_id=2)
        with session_factory() as session:
            repo = DriverRepository(session)
            assert [d.id for d in repo.list(online=True)] == [online]
            assert len(repo.list()) == 2

    def test_update_missing_driver(self, session_factory):
        assert _update(session_factory, 999, DriverPatch(is_online=True)) is None


@pytest.mark.unit
class TestDerivedFlags:
    def test_all_documents_flip_documents_uploaded(self, session_factory):
        driver_id = _create_driver(session_factory)

        driver = _update(session_factory, driver_id, DriverPatch(**ALL_DOCUMENTS))

        assert driver.documents_uploaded is True
        assert driver.kyc_status == KycStatus.PENDING

    def test_documents_across_updates(self, session_factory):
        """The flag reads the merged row, not just the patch."""
        first = dict(list(ALL_DOCUMENTS.items())[:3])
        rest = dict(list(ALL_DOCUMENTS.items())[3:])
        driver_id = _create_driver(session_factory, **first)

        assert _update(session_factory, driver_id, DriverPatch(**rest)).documents_uploaded is True

    def test_partial_documents_leave_flag_off(self, session_factory):
        driver_id = _create_driver(session_factory)
        driver = _update(
            session_factory, driver_id, DriverPatch(license_document_url="https://x/licence.pdf")
        )
        assert driver.documents_uploaded is False

    def test_documents_uploaded_never_flips_back(self, session_factory):
        driver_id = _create_driver(session_factory, **ALL_DOCUMENTS)
        driver = _update(session_factory, driver_id, DriverPatch(driver_selfie_url=None))
        assert driver.documents_uploaded is True
        assert driver.driver_selfie_url is None

    @pytest.mark.parametrize(
        "patch",
        [
            {"vehicle_model": "Toyota Prius"},
            {"vehicle_color": "Black"},
            {"plate_number": "AB-123-CD"},
            {"license_number": "L-998877"},
            {"vehicle_photo_url": "https://x/photo.jpg"},
        ],
    )
    def test_verification_field_resets_approved_kyc(self, session_factory, patch):
        driver_id = _create_driver(session_factory)
        assert _approve(session_factory, driver_id).kyc_status == KycStatus.APPROVED

        driver = _update(session_factory, driver_id, DriverPatch(**patch))

        assert driver.kyc_status == KycStatus.PENDING

    def test_same_value_still_counts_as_supplied(self, session_factory):
        driver_id = _create_driver(session_factory, vehicle_model="Prius")
        _approve(session_factory, driver_id)
        driver = _update(session_factory, driver_id, DriverPatch(vehicle_model="Prius"))
        assert driver.kyc_status == KycStatus.PENDING

    def test_unrelated_fields_keep_kyc(self, session_factory):
        driver_id = _create_driver(session_factory)
        _approve(session_factory, driver_id)
        driver = _update(
            session_factory, driver_id, DriverPatch(is_online=True, payout_method="bank")
        )
        assert driver.kyc_status == KycStatus.APPROVED
        assert driver.is_online is True


@pytest.mark.unit
class TestVerification:
    def test_reject_records_reason(self, session_factory):
        driver_id = _create_driver(session_factory)
        with unit_of_work(session_factory) as session:
            driver = DriverRepository(session).set_kyc_status(
                driver_id, KycStatus.REJECTED, notes="blurry", reason="Unreadable licence"
            )
        assert driver.kyc_status == KycStatus.REJECTED
        assert driver.rejection_reason == "Unreadable licence"
        assert driver.verification_notes == "blurry"
        assert driver.reviewed_at is not None

    def test_approve_clears_rejection_reason(self, session_factory):
        driver_id = _create_driver(session_factory)
        with unit_of_work(session_factory) as session:
            repo = DriverRepository(session)
            repo.set_kyc_status(driver_id, KycStatus.REJECTED, reason="Expired")
            driver = repo.set_kyc_status(driver_id, KycStatus.APPROVED)
        assert driver.rejection_reason is None

    def test_manual_review(self, session_factory):
        driver_id = _create_driver(session_factory)
        with unit_of_work(session_factory) as session:
            driver = DriverRepository(session).request_manual_review(driver_id, "Please recheck")
        assert driver.manual_kyc_status == ManualReviewStatus.PENDING
        assert driver.manual_kyc_notes == "Please recheck"
