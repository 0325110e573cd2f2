from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date
from typing import Optional

from .authz import Base, CredentialsMixin


class Employee(CredentialsMixin, Base):
    __tablename__ = 'employees'
    TYPE_STAFF = 'Staff'  # admin, engineers, managers
    TYPE_CRAFTSMAN = 'Craftsman'  # plumber, electrician, carpenter
    TYPE_WORKER = 'Worker'  # daily labor
    ALL_TYPES = (TYPE_STAFF, TYPE_CRAFTSMAN, TYPE_WORKER)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    job_title: Mapped[str] = mapped_column(String(64), default='')
    type: Mapped[str] = mapped_column(String(16), nullable=False, default=TYPE_STAFF)
    department: Mapped[str] = mapped_column(String(64), default='')
    salary: Mapped[int] = mapped_column(Integer, default=0)
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    email: Mapped[str] = mapped_column(String(128), default='')
    username: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    avatar: Mapped[str] = mapped_column(String(255), default='')
    status: Mapped[str] = mapped_column(String(16), default='Active')
    join_date: Mapped[Optional[str]] = mapped_column(Date)
    petty_cash_balance: Mapped[int] = mapped_column(Integer, default=0)

__all__ = ["Employee"]
