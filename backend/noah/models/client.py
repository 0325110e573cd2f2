from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Date
from typing import Optional

from .authz import Base, CredentialsMixin


class Client(CredentialsMixin, Base):
    __tablename__ = 'clients'
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(String(128))
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    email: Mapped[str] = mapped_column(String(128), default='')
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    avatar: Mapped[str] = mapped_column(String(255), default='')
    join_date: Mapped[Optional[str]] = mapped_column(Date)

__all__ = ["Client"]
