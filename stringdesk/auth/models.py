from enum import Enum
from sqlalchemy import Column, String, Boolean, Enum as SAEnum
from stringdesk.database import Base
from stringdesk.shared.models import AuditMixin


class UserRole(str, Enum):
    STRINGER = "stringer"
    CUSTOMER = "customer"


class User(Base, AuditMixin):
    __tablename__ = "users"

    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    full_name = Column(String, nullable=True)
    role = Column(SAEnum(UserRole, values_callable=lambda e: [m.value for m in e]), default=UserRole.STRINGER, nullable=False)
    is_active = Column(Boolean, default=True)

    @property
    def is_stringer(self) -> bool:
        return self.role == UserRole.STRINGER
