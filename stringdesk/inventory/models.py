from sqlalchemy import Column, String, Integer, Float, Numeric, ForeignKey
from stringdesk.database import Base
from stringdesk.shared.models import AuditMixin


class StringInventoryItem(Base, AuditMixin):
    __tablename__ = "string_inventory"

    stringer_id = Column(ForeignKey("users.id"), nullable=False, index=True)
    string_brand_id = Column(ForeignKey("string_brand.id"), nullable=True)
    string_model_id = Column(ForeignKey("string_model.id"), nullable=True, index=True)

    gauge = Column(String, nullable=True)
    color = Column(String, nullable=True)
    length_meters = Column(Float, default=12, nullable=False)
    stock_quantity = Column(Integer, default=0, nullable=False)
    min_stock_level = Column(Integer, default=5, nullable=False)
    cost_per_set = Column(Numeric(10, 2, asdecimal=False), default=0, nullable=False)
