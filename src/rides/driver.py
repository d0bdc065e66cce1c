"""Driver models and verification field groups."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from pricing.models import VehicleType


class KycStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ManualReviewStatus(str, Enum):
    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


DOCUMENT_FIELDS = (
    "license_document_url",
    "vehicle_registration_url",
    "insurance_document_url",
    "vehicle_photo_url",
    "driver_selfie_url",
)

VEHICLE_FIELDS = (
    "vehicle_model",
    "vehicle_color",
    "plate_number",
    "license_number",
)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class Driver(CamelModel):
    id: int
    user_id: int
    is_online: bool = False
    vehicle_type: VehicleType | None = None
    vehicle_model: str | None = None
    vehicle_color: str | None = None
    plate_number: str | None = None
    license_number: str | None = None
    kyc_status: KycStatus = KycStatus.PENDING
    manual_kyc_status: ManualReviewStatus = ManualReviewStatus.NONE
    manual_kyc_notes: str | None = None
    verification_notes: str | None = None
    rejection_reason: str | None = None
    reviewed_at: datetime | None = None
    documents_uploaded: bool = False
    license_document_url: str | None = None
    vehicle_registration_url: str | None = None
    insurance_document_url: str | None = None
    vehicle_photo_url: str | None = None
    driver_selfie_url: str | None = None
    bank_account_holder: str | None = None
    bank_iban: str | None = None
    payout_method: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DriverCreate(CamelModel):
    user_id: int
    is_online: bool = False
    vehicle_type: VehicleType | None = None
    vehicle_model: str | None = None
    vehicle_color: str | None = None
    plate_number: str | None = None
    license_number: str | None = None
    license_document_url: str | None = None
    vehicle_registration_url: str | None = None
    insurance_document_url: str | None = None
    vehicle_photo_url: str | None = None
    driver_selfie_url: str | None = None


class DriverPatch(CamelModel):
    """Partial driver update.

    Only fields explicitly supplied (model_fields_set) are written, so the
    derived rules can tell "sent unchanged" from "not sent".
    """

    is_online: bool | None = None
    vehicle_type: VehicleType | None = None
    vehicle_model: str | None = None
    vehicle_color: str | None = None
    plate_number: str | None = None
    license_number: str | None = None
    license_document_url: str | None = None
    vehicle_registration_url: str | None = None
    insurance_document_url: str | None = None
    vehicle_photo_url: str | None = None
    driver_selfie_url: str | None = None
    bank_account_holder: str | None = None
    bank_iban: str | None = None
    payout_method: str | None = None

    @field_validator("is_online")
    @classmethod
    def online_not_null(cls, v: bool | None) -> bool:
        # A driver is always online or offline; other fields may be cleared with null.
        if v is None:
            raise ValueError("isOnline cannot be null")
        return v

    def supplied(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)

    @property
    def touches_verification(self) -> bool:
        """Any document or vehicle/license field was supplied."""
        return any(f in self.model_fields_set for f in DOCUMENT_FIELDS + VEHICLE_FIELDS)
