"""AuditLog SQLAlchemy model"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, Text, DateTime, Uuid, Index

from .base import Base, PortableJSONB


class AuditLog(Base):
    """AuditLog model for immutable security event logging.

    Entries are append-only and never updated. The retention job hard-deletes
    them once they are older than the audit log horizon.

    actor_id is kept as a plain id rather than a foreign key so that audit
    rows outlive the accounts they mention.
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_created_at", "created_at"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    actor_id = Column(Uuid(as_uuid=True), nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(Text, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
