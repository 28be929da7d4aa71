from sqlalchemy import Column, Integer, String, ForeignKey
from stringdesk.database import Base


class StringBrand(Base):
    __tablename__ = "string_brand"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)


class StringModel(Base):
    __tablename__ = "string_model"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    brand_id = Column(ForeignKey("string_brand.id"), nullable=False, index=True)


class RacquetBrand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)


class RacquetModel(Base):
    __tablename__ = "models"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    brand_id = Column(ForeignKey("brands.id"), nullable=False, index=True)
