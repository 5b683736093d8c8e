import os, sys, pytest
# Ensure backend directory is on path so 'rolewizard' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from rolewizard import create_app, get_db
from rolewizard.models.definitions import Base
# Import all model modules to ensure tables are registered before create_all
import rolewizard.models.audit  # noqa: F401

@pytest.fixture(scope='session', autouse=True)
def app_instance():
    os.environ['DATABASE_URL'] = 'sqlite+pysqlite:///:memory:'
    app = create_app({'DATABASE_URL': 'sqlite+pysqlite:///:memory:', 'JWT_SECRET_KEY': 'test-secret-key-with-enough-length'})
    # After app and blueprints are registered, ensure all tables exist
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app

@pytest.fixture(autouse=True)
def clean_tables(app_instance):
    yield
    # every test starts from empty tables; rollback first in case a test left a failed transaction
    session = get_db()
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.expunge_all()

@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()

@pytest.fixture()
def catalogs(app_instance):
    ext = app_instance.extensions['rolewizard']
    return ext['capabilities'], ext['scopes']
