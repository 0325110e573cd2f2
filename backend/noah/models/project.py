from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, DateTime, text
from typing import Optional

from .authz import Base


class Project(Base):
    __tablename__ = 'projects'
    TYPE_DESIGN = 'Design'
    TYPE_EXECUTION = 'Execution'
    TYPE_SUPERVISION = 'Supervision'
    TYPE_OTHER = 'Other'
    ALL_TYPES = (TYPE_DESIGN, TYPE_EXECUTION, TYPE_SUPERVISION, TYPE_OTHER)
    # Design-like work carries no cost of goods in the profit model
    NO_COGS_TYPES = (TYPE_DESIGN, TYPE_SUPERVISION)

    STATUS_DESIGN = 'Design'
    STATUS_EXECUTION = 'Execution'
    STATUS_DELIVERED = 'Delivered'
    STATUS_DELAYED = 'Delayed'
    STATUS_STOPPED = 'Stopped'
    STATUS_PROPOSED = 'Proposed'
    ALL_STATUSES = (STATUS_DESIGN, STATUS_EXECUTION, STATUS_DELIVERED, STATUS_DELAYED, STATUS_STOPPED, STATUS_PROPOSED)
    ACTIVE_STATUSES = (STATUS_DESIGN, STATUS_EXECUTION)

    CONTRACT_PERCENTAGE = 'Percentage'  # cost plus
    CONTRACT_LUMP_SUM = 'LumpSum'
    ALL_CONTRACTS = (CONTRACT_PERCENTAGE, CONTRACT_LUMP_SUM)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    client_name: Mapped[str] = mapped_column(String(128), nullable=False, default='')
    client_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    budget: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location: Mapped[str] = mapped_column(String(128), default='')
    type: Mapped[str] = mapped_column(String(16), nullable=False, default=TYPE_EXECUTION)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_PROPOSED)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_date: Mapped[Optional[str]] = mapped_column(Date)
    contract_type: Mapped[Optional[str]] = mapped_column(String(16))
    company_percentage: Mapped[Optional[int]] = mapped_column(Integer)
    agreed_labor_budget: Mapped[Optional[int]] = mapped_column(Integer)
    workshop_balance: Mapped[Optional[int]] = mapped_column(Integer)
    workshop_threshold: Mapped[Optional[int]] = mapped_column(Integer)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))

    @property
    def is_design_work(self) -> bool:
        return self.type == self.TYPE_DESIGN or self.status == self.STATUS_DESIGN

__all__ = ["Project"]
