from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import os

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()

IN_MEMORY_URL = 'sqlite+pysqlite:///:memory:'


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ('0', 'false', 'no', 'off', '')


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', IN_MEMORY_URL)
    app.config['SEED_DEMO_DATA'] = os.getenv('SEED_DEMO_DATA', '1')
    app.config['DEFAULT_CURRENCY'] = os.getenv('DEFAULT_CURRENCY', 'USD')
    app.config['WORKSHOP_ACCOUNT'] = os.getenv('WORKSHOP_ACCOUNT', 'صندوق الورشة')
    app.json.ensure_ascii = False

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    # Register every model on the shared metadata, then build the schema
    from .models.authz import Base
    from .models import audit, client, employee, trustee, investor, project, transaction, invoice, payroll  # noqa: F401
    Base.metadata.create_all(db_engine)

    jwt.init_app(app)

    from .routes.iam import iam_bp  # login, navigation guard, permission settings
    from .routes.projects import projects_bp
    from .routes.accounting import acc_bp  # transactions and invoices
    from .routes.ledgers import ledgers_bp, portal_bp
    from .routes.reports import rpt_bp
    from .routes.payroll import payroll_bp
    from .routes.audit import audit_bp
    app.register_blueprint(iam_bp, url_prefix='/iam')
    app.register_blueprint(projects_bp, url_prefix='/projects')
    app.register_blueprint(acc_bp, url_prefix='/accounting')
    app.register_blueprint(ledgers_bp, url_prefix='/ledgers')
    app.register_blueprint(portal_bp, url_prefix='/portal')
    app.register_blueprint(rpt_bp, url_prefix='/reports')
    app.register_blueprint(payroll_bp, url_prefix='/hr/payroll')
    app.register_blueprint(audit_bp, url_prefix='/audit')

    if _flag(app.config['SEED_DEMO_DATA']):
        from .seeds.demo import seed_demo_data
        session = SessionLocal()
        try:
            seed_demo_data(session)
        finally:
            SessionLocal.remove()

    @app.teardown_appcontext
    def remove_session(exc=None):
        SessionLocal.remove()

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'error': {
                    'status': e.code,
                    'title': e.name,
                    'detail': e.description,
                }
            }
            return payload, e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        SessionLocal.rollback()
        return {
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
                'detail': 'Unexpected error'
            }
        }, 500

    return app


def get_db():
    return SessionLocal()
