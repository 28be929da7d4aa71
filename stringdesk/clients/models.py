from sqlalchemy import Column, String, Float, ForeignKey
from stringdesk.database import Base
from stringdesk.shared.models import AuditMixin


class Client(Base, AuditMixin):
    """Customer of a stringer, with optional per-side stringing preferences."""
    __tablename__ = "clients"

    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    default_tension_main = Column(Float, nullable=True)
    default_tension_cross = Column(Float, nullable=True)
    preferred_main_brand_id = Column(ForeignKey("string_brand.id"), nullable=True)
    preferred_main_model_id = Column(ForeignKey("string_model.id"), nullable=True)
    preferred_cross_brand_id = Column(ForeignKey("string_brand.id"), nullable=True)
    preferred_cross_model_id = Column(ForeignKey("string_model.id"), nullable=True)

    stringer_id = Column(ForeignKey("users.id"), nullable=False, index=True)
    customer_user_id = Column(ForeignKey("users.id"), nullable=True, index=True)
