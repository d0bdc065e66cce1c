"""Driver repository. Derived verification flags are computed inside the UPDATE."""

from typing import Any

from sqlalchemy import and_, case, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError
from rides.driver import (
    DOCUMENT_FIELDS,
    DriverCreate,
    DriverPatch,
    KycStatus,
    ManualReviewStatus,
)
from rides.driver import Driver as DriverDomain

from ..schema import Driver
from ..utils import column_values, utc_now


class DriverRepository:
    """Repository for driver CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, data: DriverCreate) -> DriverDomain:
        values = column_values(data.model_dump())
        driver = Driver(
            **values,
            kyc_status=KycStatus.PENDING.value,
            manual_kyc_status=ManualReviewStatus.NONE.value,
            documents_uploaded=all(values.get(f) for f in DOCUMENT_FIELDS),
        )
        self.session.add(driver)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f"A driver for user {data.user_id} already exists") from e
        return self._to_domain(driver)

    def get(self, driver_id: int) -> DriverDomain | None:
        driver = self.session.get(Driver, driver_id)
        if driver is None:
            return None
        return self._to_domain(driver)

    def list(self, online: bool | None = None) -> list[DriverDomain]:
        stmt = select(Driver)
        if online is not None:
            stmt = stmt.where(Driver.is_online.is_(online))
        stmt = stmt.order_by(Driver.id)
        return [self._to_domain(d) for d in self.session.execute(stmt).scalars()]

    def update(self, driver_id: int, patch: DriverPatch) -> DriverDomain | None:
        """Merge a patch and apply the derived flags in one UPDATE ... RETURNING.

        documents_uploaded turns on once every document URL is present in the
        merged row and never turns off. kyc_status goes back to pending when
        any document or vehicle field is supplied.
        """
        supplied = column_values(patch.supplied())
        values: dict[str, Any] = dict(supplied)

        documents_uploaded = _documents_uploaded_expression(supplied)
        if documents_uploaded is not None:
            values["documents_uploaded"] = documents_uploaded
        if patch.touches_verification:
            values["kyc_status"] = case(
                (Driver.kyc_status != KycStatus.PENDING.value, KycStatus.PENDING.value),
                else_=Driver.kyc_status,
            )

        if not values:
            return self.get(driver_id)
        return self._update(driver_id, values)

    def set_kyc_status(
        self,
        driver_id: int,
        status: KycStatus,
        notes: str | None = None,
        reason: str | None = None,
    ) -> DriverDomain | None:
        values = {
            "kyc_status": status.value,
            "verification_notes": notes,
            "rejection_reason": reason if status == KycStatus.REJECTED else None,
            "reviewed_at": utc_now(),
        }
        return self._update(driver_id, values)

    def request_manual_review(self, driver_id: int, notes: str | None = None) -> DriverDomain | None:
        values = {
            "manual_kyc_status": ManualReviewStatus.PENDING.value,
            "manual_kyc_notes": notes,
        }
        return self._update(driver_id, values)

    def _update(self, driver_id: int, values: dict[str, Any]) -> DriverDomain | None:
        stmt = (
            update(Driver)
            .where(Driver.id == driver_id)
            .values(**values)
            .returning(Driver)
            .execution_options(synchronize_session=False, populate_existing=True)
        )
        driver = self.session.execute(stmt).scalars().first()
        if driver is None:
            return None
        return self._to_domain(driver)

    def _to_domain(self, driver: Driver) -> DriverDomain:
        return DriverDomain.model_validate(driver)


def _documents_uploaded_expression(supplied: dict[str, Any]) -> Any:
    """SQL value for documents_uploaded after merging ``supplied``, or None to leave it.

    Supplied document fields are known in Python; the rest are checked
    against the stored row.
    """
    stored_checks = []
    for field in DOCUMENT_FIELDS:
        if field in supplied:
            if not supplied[field]:
                return None
        else:
            column = getattr(Driver, field)
            stored_checks.append(and_(column.is_not(None), column != ""))

    if not stored_checks:
        return True
    return case((and_(*stored_checks), True), else_=Driver.documents_uploaded)
