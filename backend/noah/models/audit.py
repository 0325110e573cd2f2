from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, DateTime, func

from .authz import Base  # reuse same metadata


class ActivityLog(Base):
    __tablename__ = 'activity_logs'
    ACTIONS = ('CREATE', 'UPDATE', 'DELETE', 'APPROVE', 'LOGIN')
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(128), nullable=False, default='')
    user_role: Mapped[str] = mapped_column(String(32), nullable=False, default='', index=True)
    action: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    entity: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(64), nullable=True)
    description: Mapped[str] = mapped_column(String(512), nullable=False, default='')
    timestamp: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)
