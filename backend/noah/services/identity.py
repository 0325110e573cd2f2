"""Login resolution across the five principal pools.

Pools are searched in a fixed priority order: system users (by email), clients
(by username), employees (by username, email or full name), trustees and
investors (by username). Identifier comparison is trimmed and case-insensitive;
a candidate only wins when its password verifies against the stored hash, so an
identifier shared across pools falls through to the next pool on a mismatch.
Failures never reveal which part of the credentials was wrong.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Optional, Tuple
from sqlalchemy import select, func, or_

from noah.constants import roles
from noah.models.authz import SystemUser
from noah.models.client import Client
from noah.models.employee import Employee
from noah.models.trustee import Trustee
from noah.models.investor import Investor
from noah.services.audit import add_audit

INVALID_CREDENTIALS = 'invalid credentials'


class AuthError(Exception):
    """Generic authentication failure (unknown identifier or wrong password)."""

    def __init__(self, message: str = INVALID_CREDENTIALS):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Principal:
    id: str
    name: str
    role: str
    email: str = ''
    avatar: str = ''
    client_username: Optional[str] = None
    employee_id: Optional[str] = None
    trustee_id: Optional[str] = None
    investor_id: Optional[str] = None

    @property
    def is_portal(self) -> bool:
        return self.role in roles.PORTAL_ROLES

    def to_claims(self) -> Dict[str, Any]:
        claims = asdict(self)
        claims.pop('id')
        return claims

    @classmethod
    def from_claims(cls, identity: str, claims: Dict[str, Any]) -> 'Principal':
        return cls(
            id=identity,
            name=claims.get('name', ''),
            role=claims.get('role', ''),
            email=claims.get('email', ''),
            avatar=claims.get('avatar', ''),
            client_username=claims.get('client_username'),
            employee_id=claims.get('employee_id'),
            trustee_id=claims.get('trustee_id'),
            investor_id=claims.get('investor_id'),
        )


def _norm(value: Optional[str]) -> str:
    return (value or '').strip().lower()


def _staff_principal(u: SystemUser) -> Principal:
    return Principal(id=u.id, name=u.name, role=u.role, email=u.email, avatar=u.avatar or '')


def _client_principal(c: Client) -> Principal:
    return Principal(id=c.id, name=c.name, role=roles.CLIENT, email=c.email or '',
                     avatar=c.avatar or '', client_username=c.username)


def _employee_principal(e: Employee) -> Principal:
    return Principal(id=e.id, name=e.name, role=roles.EMPLOYEE, email=e.email or '',
                     avatar=e.avatar or '', employee_id=e.id)


def _trustee_principal(t: Trustee) -> Principal:
    return Principal(id=t.id, name=t.name, role=roles.TRUSTEE, avatar=t.avatar or '', trustee_id=t.id)


def _investor_principal(i: Investor) -> Principal:
    return Principal(id=i.id, name=i.name, role=roles.INVESTOR, email=i.email or '',
                     avatar=i.avatar or '', investor_id=i.id)


# (model, identifier columns, principal builder) in priority order
POOLS: Tuple[Tuple[Any, Tuple[Any, ...], Callable[[Any], Principal]], ...] = (
    (SystemUser, (SystemUser.email,), _staff_principal),
    (Client, (Client.username,), _client_principal),
    (Employee, (Employee.username, Employee.email, Employee.name), _employee_principal),
    (Trustee, (Trustee.username,), _trustee_principal),
    (Investor, (Investor.username,), _investor_principal),
)


def _candidates(session, model, columns, ident: str):
    match = or_(*(func.lower(func.trim(col)) == ident for col in columns))
    return session.execute(select(model).where(match).order_by(model.id)).scalars()


def resolve_login(session, identifier: str, password: str) -> Principal:
    """Return the Principal for the first pool whose record matches and verifies.

    Raises AuthError when nothing matches. Staff logins are recorded in the activity log
    (the caller owns the commit).
    """
    ident = _norm(identifier)
    if not ident or not password:
        raise AuthError()
    for model, columns, build in POOLS:
        for record in _candidates(session, model, columns, ident):
            if record.verify_password(password):
                principal = build(record)
                if model is SystemUser:
                    add_audit(principal, 'LOGIN', 'Settings', 'تسجيل دخول للنظام', entity_id=principal.id, session=session)
                return principal
    raise AuthError()


__all__ = ['AuthError', 'Principal', 'resolve_login', 'INVALID_CREDENTIALS']
