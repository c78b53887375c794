import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, Float, String, Text

from partnerhub.db.base_class import Base


class PartnerType(str, Enum):
    INDIVIDUAL = "individual"
    COMPANY = "company"
    FREELANCER = "freelancer"


class PartnerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    SUSPENDED = "suspended"


class Partner(Base):
    __tablename__ = "partners"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)  # contact person
    email = Column(String(255), nullable=False, index=True)
    company_name = Column(String(255), nullable=True, index=True)
    type = Column(String(16), nullable=False, default=PartnerType.COMPANY.value)
    status = Column(String(16), nullable=False, default=PartnerStatus.PENDING.value)
    description = Column(Text, nullable=True)
    rating = Column(Float, nullable=True)
    organization_id = Column(String(36), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
