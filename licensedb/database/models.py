"""SQLAlchemy models for all database tables."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from licensedb.core.database import Base

AUDIT_TYPE_OBLIGATION = "Obligation"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """User that can act on obligations; referenced by audits."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String, unique=True, nullable=False)

    audits: Mapped[list["Audit"]] = relationship("Audit", back_populates="user")


class License(Base):
    """License an obligation can be attached to, looked up by shortname."""

    __tablename__ = "licenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shortname: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    fullname: Mapped[str | None] = mapped_column(String, nullable=True)

    obligation_links: Mapped[list["ObligationLicense"]] = relationship(
        "ObligationLicense", back_populates="license", cascade="all, delete-orphan"
    )


class Obligation(Base):
    """Compliance requirement tied to one or more licenses."""

    __tablename__ = "obligations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    classification: Mapped[str] = mapped_column(String, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    modifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    text_updatable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    md5: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False, comment="Hex MD5 digest of text"
    )

    license_links: Mapped[list["ObligationLicense"]] = relationship(
        "ObligationLicense", back_populates="obligation", cascade="all, delete-orphan"
    )


class ObligationLicense(Base):
    """Join row linking an obligation to a license."""

    __tablename__ = "obligation_licenses"

    obligation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("obligations.id", ondelete="CASCADE"), primary_key=True
    )
    license_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("licenses.id", ondelete="CASCADE"), primary_key=True
    )

    obligation: Mapped["Obligation"] = relationship("Obligation", back_populates="license_links")
    license: Mapped["License"] = relationship("License", back_populates="obligation_links")


class Audit(Base):
    """Record of the field changes one user applied in one update."""

    __tablename__ = "audits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    type_id: Mapped[int] = mapped_column(
        Integer, nullable=False, index=True, comment="Id of the audited entity"
    )
    type: Mapped[str] = mapped_column(
        String, nullable=False, comment="Kind of the audited entity, e.g. Obligation"
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    user: Mapped["User"] = relationship("User", back_populates="audits")
    change_logs: Mapped[list["ChangeLog"]] = relationship(
        "ChangeLog",
        back_populates="audit",
        cascade="all, delete-orphan",
        order_by="ChangeLog.id",
    )


class ChangeLog(Base):
    """Single field change inside an audit."""

    __tablename__ = "change_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    audit_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("audits.id", ondelete="CASCADE"), nullable=False
    )
    field: Mapped[str] = mapped_column(String, nullable=False)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_value: Mapped[str | None] = mapped_column(Text, nullable=True)

    audit: Mapped["Audit"] = relationship("Audit", back_populates="change_logs")
