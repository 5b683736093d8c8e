from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging
import os

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', 'sqlite:///dev.db')
    app.config['CAPABILITY_CATALOG_PATH'] = os.getenv('CAPABILITY_CATALOG_PATH')
    app.config['SCOPE_CATALOG_PATH'] = os.getenv('SCOPE_CATALOG_PATH')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger('rolewizard').setLevel(app.config['LOG_LEVEL'])

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

    jwt.init_app(app)

    # Catalogs are built per app and handed to the engine explicitly
    from .services.catalog import build_catalogs
    capabilities, scopes = build_catalogs(app.config['CAPABILITY_CATALOG_PATH'], app.config['SCOPE_CATALOG_PATH'])
    app.extensions['rolewizard'] = {'capabilities': capabilities, 'scopes': scopes}

    from .routes.catalog import catalog_bp
    from .routes.wizard import wizard_bp
    app.register_blueprint(catalog_bp, url_prefix='/wizard')
    app.register_blueprint(wizard_bp, url_prefix='/wizard')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    from .errors import WizardError

    @app.errorhandler(WizardError)
    def handle_wizard_error(e):  # type: ignore
        if e.status != 400:
            app.logger.warning('%s: %s', e.code, e.detail)
        return {'error': e.to_dict()}, e.status

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


def get_catalogs():
    """(CapabilityCatalog, ScopeCatalog) of the current app."""
    from flask import current_app
    ext = current_app.extensions['rolewizard']
    return ext['capabilities'], ext['scopes']
