from __future__ import annotations
from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy import String, JSON, DateTime, text
from typing import List, Optional

Base = declarative_base()


class CredentialsMixin:
    """Login credentials shared by every principal pool. Only the hash is stored."""
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, default='')

    def set_password(self, raw: str):
        from werkzeug.security import generate_password_hash
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: Optional[str]) -> bool:
        from werkzeug.security import check_password_hash
        if not raw or not self.password_hash:
            return False
        return check_password_hash(self.password_hash, raw)


# --- Staff accounts ---
class SystemUser(CredentialsMixin, Base):
    __tablename__ = 'system_users'
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    avatar: Mapped[str] = mapped_column(String(255), default='')
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))


class RolePermissions(Base):
    """Allow-list of viewable module tags for one configurable role."""
    __tablename__ = 'role_permissions'
    role: Mapped[str] = mapped_column(String(32), primary_key=True)
    can_view: Mapped[List[str]] = mapped_column(JSON, default=list)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))
