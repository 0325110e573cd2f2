from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, JSON, ForeignKey
from typing import List, Optional

from .authz import Base, CredentialsMixin


class Investor(CredentialsMixin, Base):
    __tablename__ = 'investors'
    # Capital: share of annual company profit; Partner: profit tied to linked execution projects
    KIND_CAPITAL = 'Capital'
    KIND_PARTNER = 'Partner'
    ALL_KINDS = (KIND_CAPITAL, KIND_PARTNER)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    kind: Mapped[str] = mapped_column(String(16), nullable=False, default=KIND_CAPITAL)
    agreement_details: Mapped[str] = mapped_column(String(512), default='')
    profit_percentage: Mapped[Optional[int]] = mapped_column(Integer)
    linked_project_ids: Mapped[List[str]] = mapped_column(JSON, default=list)
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    email: Mapped[str] = mapped_column(String(128), default='')
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    avatar: Mapped[str] = mapped_column(String(255), default='')
    join_date: Mapped[Optional[str]] = mapped_column(Date)


class InvestorTransaction(Base):
    __tablename__ = 'investor_transactions'
    TYPE_CAPITAL_INJECTION = 'Capital_Injection'
    TYPE_PROFIT_DISTRIBUTION = 'Profit_Distribution'
    TYPE_WITHDRAWAL = 'Withdrawal'
    ALL_TYPES = (TYPE_CAPITAL_INJECTION, TYPE_PROFIT_DISTRIBUTION, TYPE_WITHDRAWAL)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    investor_id: Mapped[str] = mapped_column(ForeignKey('investors.id'), index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    date: Mapped[str] = mapped_column(Date, nullable=False)
    notes: Mapped[str] = mapped_column(String(255), default='')

__all__ = ["Investor", "InvestorTransaction"]
