from enum import Enum
from sqlalchemy import Column, String, Float, Numeric, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from stringdesk.database import Base
from stringdesk.shared.models import AuditMixin


class JobType(str, Enum):
    STRINGING = "stringing"
    REGRIP = "regrip"
    REPAIR = "repair"
    OTHER = "other"


class JobStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PICKED_UP = "picked_up"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Job(Base, AuditMixin):
    __tablename__ = "jobs"

    client_id = Column(ForeignKey("clients.id"), nullable=False, index=True)
    racquet_id = Column(ForeignKey("racquets.id"), nullable=False, index=True)
    stringer_id = Column(ForeignKey("users.id"), nullable=False, index=True)

    job_type = Column(SAEnum(JobType, name="job_type", values_callable=_enum_values), default=JobType.STRINGING, nullable=False)
    job_status = Column(SAEnum(JobStatus, name="job_status", values_callable=_enum_values), default=JobStatus.PENDING, nullable=False)
    job_notes = Column(String, nullable=True)
    due_date = Column(DateTime, nullable=True)
    completed_date = Column(DateTime, nullable=True)

    stringing_detail = relationship(
        "JobStringingDetail",
        back_populates="job",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class JobStringingDetail(Base, AuditMixin):
    """Explicit per-job stringing choices. Unset fields stay NULL; defaults are resolved on read."""
    __tablename__ = "job_stringing_details"

    job_id = Column(ForeignKey("jobs.id"), nullable=False, unique=True)
    main_brand_id = Column(ForeignKey("string_brand.id"), nullable=True)
    main_string_model_id = Column(ForeignKey("string_model.id"), nullable=True)
    cross_brand_id = Column(ForeignKey("string_brand.id"), nullable=True)
    cross_string_model_id = Column(ForeignKey("string_model.id"), nullable=True)
    tension_main = Column(Float, nullable=True)
    tension_cross = Column(Float, nullable=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=True)

    job = relationship("Job", back_populates="stringing_detail")
