from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt
from sqlalchemy import select
from noah import get_db, jwt
from noah.constants import roles
from noah.models.authz import RolePermissions
from noah.services.identity import resolve_login, AuthError
from noah.services.policy import load_permission_table, guard_navigation, visible_menu, current_principal
from noah.decorators.audit import audit_log
from noah.decorators.auth import require_module

iam_bp = Blueprint('iam', __name__)

# Revoked token ids (logout); process local like the rest of the session state
REVOKED_JTIS = set()

PORTAL_LANDING = {
    roles.CLIENT: 'client_portal',
    roles.EMPLOYEE: 'employee_portal',
    roles.TRUSTEE: 'trustee_portal',
    roles.INVESTOR: 'investor_portal',
}


@jwt.token_in_blocklist_loader
def _is_revoked(jwt_header, jwt_payload):
    return jwt_payload.get('jti') in REVOKED_JTIS


def _landing_page(role: str) -> str:
    return PORTAL_LANDING.get(role, roles.DEFAULT_PAGE)


@iam_bp.post('/auth/login')
def login():
    data = request.json or {}
    identifier = data.get('identifier') or data.get('email') or data.get('username')
    password = data.get('password')
    if not identifier or not password:
        abort(400, description='identifier & password required')
    session = get_db()
    try:
        principal = resolve_login(session, identifier, password)
    except AuthError as e:
        abort(401, description=e.message)
    session.commit()
    current_app.logger.info('Login: %s (%s)', principal.name, principal.role)
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=str(principal.id), additional_claims=principal.to_claims())
    return {
        'access_token': token,
        'principal': {'id': principal.id, **principal.to_claims()},
        'landing_page': _landing_page(principal.role),
    }


@iam_bp.get('/auth/me')
@jwt_required()
def me():
    principal = current_principal()
    return {'id': principal.id, **principal.to_claims(), 'is_portal': principal.is_portal}


@iam_bp.post('/auth/logout')
@jwt_required()
def logout():
    REVOKED_JTIS.add(get_jwt()['jti'])
    return {'status': 'logged_out'}


@iam_bp.get('/navigation')
@jwt_required()
def navigate():
    """Route guard decision for a navigation change (denials redirect, never error)."""
    page = request.args.get('page') or roles.DEFAULT_PAGE
    role = get_jwt().get('role', '')
    decision = guard_navigation(role, page, load_permission_table(get_db()))
    return decision.to_dict()


@iam_bp.get('/menu')
@jwt_required()
def menu():
    role = get_jwt().get('role', '')
    return {'role': role, 'modules': visible_menu(role, load_permission_table(get_db()))}


@iam_bp.get('/permissions')
@require_module('settings')
def list_permissions():
    session = get_db()
    rows = session.execute(select(RolePermissions).order_by(RolePermissions.role)).scalars().all()
    return {
        'data': [{'role': rp.role, 'can_view': list(rp.can_view or [])} for rp in rows],
        'available_modules': list(roles.PERMISSION_TAGS),
    }


@iam_bp.put('/permissions/<role>')
@require_module('settings')
@audit_log('UPDATE', entity='Settings', entity_id_key='role',
           describe=lambda data: f"تعديل صلاحيات الدور {data.get('role')}")
def replace_permissions(role):
    if role not in roles.STAFF_ROLES:
        abort(400, description='role invalid')
    data = request.json or {}
    modules = data.get('can_view')
    if not isinstance(modules, list):
        abort(400, description='can_view must be a list')
    unknown = [m for m in modules if m not in roles.PERMISSION_TAGS]
    if unknown:
        abort(400, description=f"unknown modules: {', '.join(map(str, unknown))}")
    session = get_db()
    rp = session.get(RolePermissions, role)
    if rp is None:
        rp = RolePermissions(role=role)
        session.add(rp)
    # keep sidebar order, drop duplicates
    rp.can_view = [m for m in roles.PERMISSION_TAGS if m in modules]
    session.commit()
    return {'role': rp.role, 'can_view': list(rp.can_view)}
