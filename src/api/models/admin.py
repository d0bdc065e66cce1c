"""Request bodies for admin ride and driver actions."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AdminRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssignRideRequest(AdminRequest):
    driver_id: int


class CancelRideRequest(AdminRequest):
    reason: str | None = None


class TransferRideRequest(AdminRequest):
    to_driver_id: int


class ApproveDriverRequest(AdminRequest):
    notes: str | None = None


class RejectDriverRequest(AdminRequest):
    reason: str = Field(min_length=1)
    notes: str | None = None


class ManualReviewRequest(AdminRequest):
    notes: str | None = None
