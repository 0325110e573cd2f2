import os, sys, pytest
# Ensure the backend directory is on path so 'noah' and 'tests.*' helpers can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from noah import create_app, get_db
from noah.models.authz import Base

@pytest.fixture(scope='session', autouse=True)
def app_instance():
    os.environ['DATABASE_URL'] = 'sqlite+pysqlite:///:memory:'
    # demo dataset (admin@noah.com / 123456 and friends) is the shared baseline
    app = create_app({'SEED_DEMO_DATA': True, 'JWT_SECRET_KEY': 'test-secret-key-with-enough-length'})
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app

@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()
