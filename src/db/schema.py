"""SQLAlchemy ORM models for dispatch persistence."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, Float, Index, Integer, String, Text
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from .utils import utc_now


class DecimalString(TypeDecorator[Decimal]):
    """Stores Decimal values as their exact string form.

    Keeps money exact on backends without a native decimal type (SQLite).
    """

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return str(Decimal(str(value)))

    def process_result_value(self, value: Any, dialect: Dialect) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value)


class Base(DeclarativeBase):
    pass


class Ride(Base):
    __tablename__ = "rides"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    driver_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    pickup_location: Mapped[str] = mapped_column(String, nullable=False)
    dropoff_location: Mapped[str] = mapped_column(String, nullable=False)
    pickup_coords: Mapped[dict[str, float] | None] = mapped_column(JSON, nullable=True)
    dropoff_coords: Mapped[dict[str, float] | None] = mapped_column(JSON, nullable=True)
    vehicle_type: Mapped[str] = mapped_column(String, nullable=False)
    fare: Mapped[str] = mapped_column(String(32), nullable=False)
    base_fare: Mapped[str] = mapped_column(String(32), nullable=False)
    distance: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False)
    request_time: Mapped[datetime] = mapped_column(default=lambda: utc_now())
    start_time: Mapped[datetime | None] = mapped_column(nullable=True)
    end_time: Mapped[datetime | None] = mapped_column(nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_scheduled: Mapped[bool] = mapped_column(Boolean, default=False)
    scheduled_time: Mapped[datetime | None] = mapped_column(nullable=True)
    payment_method: Mapped[str] = mapped_column(String, default="cash")
    payment_status: Mapped[str] = mapped_column(String, default="pending")
    ride_type: Mapped[str] = mapped_column(String, default="standard")
    estimated_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )

    __table_args__ = (
        Index("idx_ride_status", "status"),
        Index("idx_ride_driver", "driver_id"),
        Index("idx_ride_customer", "customer_id"),
    )


class Driver(Base):
    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    is_online: Mapped[bool] = mapped_column(Boolean, default=False)
    vehicle_type: Mapped[str | None] = mapped_column(String, nullable=True)
    vehicle_model: Mapped[str | None] = mapped_column(String, nullable=True)
    vehicle_color: Mapped[str | None] = mapped_column(String, nullable=True)
    plate_number: Mapped[str | None] = mapped_column(String, nullable=True)
    license_number: Mapped[str | None] = mapped_column(String, nullable=True)
    kyc_status: Mapped[str] = mapped_column(String, default="pending")
    manual_kyc_status: Mapped[str] = mapped_column(String, default="none")
    manual_kyc_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    documents_uploaded: Mapped[bool] = mapped_column(Boolean, default=False)
    license_document_url: Mapped[str | None] = mapped_column(String, nullable=True)
    vehicle_registration_url: Mapped[str | None] = mapped_column(String, nullable=True)
    insurance_document_url: Mapped[str | None] = mapped_column(String, nullable=True)
    vehicle_photo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    driver_selfie_url: Mapped[str | None] = mapped_column(String, nullable=True)
    bank_account_holder: Mapped[str | None] = mapped_column(String, nullable=True)
    bank_iban: Mapped[str | None] = mapped_column(String, nullable=True)
    payout_method: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: utc_now())
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )

    __table_args__ = (
        Index("idx_driver_online", "is_online"),
        Index("idx_driver_kyc", "kyc_status"),
    )


class DistanceFare(Base):
    __tablename__ = "fare_by_distance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vehicle_type: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    base_fare: Mapped[Decimal] = mapped_column(DecimalString, nullable=False)
    per_km: Mapped[Decimal] = mapped_column(DecimalString, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )


class FlatRouteFare(Base):
    __tablename__ = "fare_flat_routes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    route_name: Mapped[str] = mapped_column(String, nullable=False)
    from_location: Mapped[str] = mapped_column(String, nullable=False)
    to_location: Mapped[str] = mapped_column(String, nullable=False)
    vehicle_type: Mapped[str] = mapped_column(String, nullable=False)
    price: Mapped[Decimal] = mapped_column(DecimalString, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )

    __table_args__ = (Index("idx_flat_route_vehicle", "vehicle_type", "is_active"),)


class HourlyFare(Base):
    __tablename__ = "fare_hourly"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vehicle_type: Mapped[str] = mapped_column(String, nullable=False)
    price_per_hour: Mapped[Decimal] = mapped_column(DecimalString, nullable=False)
    minimum_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    maximum_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )

    __table_args__ = (Index("idx_hourly_vehicle", "vehicle_type", "is_active"),)


class ExtraFare(Base):
    __tablename__ = "fare_extras"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item: Mapped[str] = mapped_column(String, nullable=False)
    price: Mapped[Decimal] = mapped_column(DecimalString, nullable=False)
    applicable_vehicle_types: Mapped[str] = mapped_column(String, default="all")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )


class ServiceMetadata(Base):
    __tablename__ = "service_metadata"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(String, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )
