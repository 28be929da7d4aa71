from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey
from stringdesk.database import Base
from stringdesk.shared.models import AuditMixin


class Racquet(Base, AuditMixin):
    __tablename__ = "racquets"

    client_id = Column(ForeignKey("clients.id"), nullable=False, index=True)
    brand_id = Column(ForeignKey("brands.id"), nullable=False)
    model_id = Column(ForeignKey("models.id"), nullable=False)

    head_size = Column(Integer, nullable=True)
    string_pattern = Column(String, nullable=True)  # e.g. "16x19"
    weight_grams = Column(Float, nullable=True)
    balance_point = Column(String, nullable=True)
    stiffness_rating = Column(Integer, nullable=True)
    length_cm = Column(Float, nullable=True)
    notes = Column(String, nullable=True)
    stringing_notes = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    last_stringing_date = Column(DateTime, nullable=True)
