from __future__ import annotations
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Mapping, Optional
from flask_jwt_extended import get_jwt, get_jwt_identity
from sqlalchemy import select

from noah.constants import roles
from noah.models.authz import RolePermissions

log = logging.getLogger(__name__)

PermissionTable = Mapping[str, Iterable[str]]


def load_permission_table(session) -> Dict[str, List[str]]:
    """Role -> allow-list, as currently configured in settings."""
    return {rp.role: list(rp.can_view or []) for rp in session.execute(select(RolePermissions)).scalars()}


def resolve_module(page: str) -> str:
    """Map a navigation target to the permission tag it is checked against."""
    return roles.MODULE_ALIASES.get(page, page)


def can_view(role: str, module: str, table: PermissionTable) -> bool:
    """True when `role` may view `module`.

    A role with no row in the table is allowed everything. That fallback is kept on
    purpose for roles that were never configured; it is unusually permissive.
    """
    if module in roles.ALWAYS_VISIBLE:
        return True
    allowed = table.get(role)
    if allowed is None:
        log.debug('No permission row for role %r; allowing %r', role, module)
        return True
    return module in allowed


@dataclass(frozen=True)
class GuardDecision:
    requested: str
    page: str  # page to render (requested page or the redirect target)
    module: Optional[str]
    allowed: bool
    bypassed: bool = False

    def to_dict(self):
        return asdict(self)


def guard_navigation(role: str, page: str, table: PermissionTable) -> GuardDecision:
    """Run the route guard for one navigation change.

    Portal roles never reach the staff pages, so the guard does not apply to them.
    Staff roles are redirected to the dashboard when the target is not permitted.
    """
    if role in roles.PORTAL_ROLES:
        return GuardDecision(requested=page, page=page, module=None, allowed=True, bypassed=True)
    module = resolve_module(page)
    if can_view(role, module, table):
        return GuardDecision(requested=page, page=page, module=module, allowed=True)
    log.warning('Access denied: role %r cannot view %r (page %r); redirecting to %s', role, module, page, roles.DEFAULT_PAGE)
    return GuardDecision(requested=page, page=roles.DEFAULT_PAGE, module=module, allowed=False)


def visible_menu(role: str, table: PermissionTable) -> List[str]:
    if role in roles.PORTAL_ROLES:
        return []
    return [m for m in roles.MODULES if can_view(role, resolve_module(m), table)]


def current_principal():
    """Principal rebuilt from the verified JWT of the current request."""
    from noah.services.identity import Principal
    return Principal.from_claims(get_jwt_identity(), get_jwt())


def assert_owns_portal_record(attr: str, record_id: str):
    """Portal principals may only read their own ledger."""
    principal = current_principal()
    if principal.role in roles.PORTAL_ROLES and getattr(principal, attr, None) != record_id:
        from flask import abort
        abort(403, description='Record ownership required')
