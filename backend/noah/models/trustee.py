from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, ForeignKey
from typing import Optional

from .authz import Base, CredentialsMixin


class Trustee(CredentialsMixin, Base):
    """Holder of funds kept in trust. Balance is never stored; see services.ledger."""
    __tablename__ = 'trustees'
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    relation: Mapped[str] = mapped_column(String(64), default='')
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    avatar: Mapped[str] = mapped_column(String(255), default='')


class TrustTransaction(Base):
    __tablename__ = 'trust_transactions'
    TYPE_DEPOSIT = 'Deposit'
    TYPE_WITHDRAWAL = 'Withdrawal'
    ALL_TYPES = (TYPE_DEPOSIT, TYPE_WITHDRAWAL)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    trustee_id: Mapped[str] = mapped_column(ForeignKey('trustees.id'), index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    date: Mapped[str] = mapped_column(Date, nullable=False)
    notes: Mapped[str] = mapped_column(String(255), default='')

__all__ = ["Trustee", "TrustTransaction"]
