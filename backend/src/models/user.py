"""User SQLAlchemy model"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, Text, Boolean, DateTime, Uuid, CheckConstraint
from sqlalchemy.orm import relationship, validates
import re

from .base import Base


class User(Base):
    """Authentication account that an employee may be linked to.

    Login and session handling live outside this service; the retention job
    only ever severs the link from an anonymized employee to its account.
    """
    __tablename__ = "user"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="EMPLOYEE")
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    employee = relationship("Employee", back_populates="user", uselist=False)

    __table_args__ = (
        CheckConstraint(
            "role IN ('ADMIN', 'HR', 'MANAGER', 'EMPLOYEE')",
            name='ck_user_role'
        ),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()
