"""
Configuración común de los tests

La base de datos de pruebas es un SQLite en fichero que se crea y se
borra en cada test. Las variables de entorno se fijan antes de importar
la aplicación para que Settings no lea credenciales reales.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["FUNCTION_SECRET"] = ""
os.environ["WHATSAPP_API_KEY"] = ""
os.environ["WHATSAPP_PHONE_ID"] = ""
os.environ["WEBHOOK_NOMINAS_URL"] = ""
os.environ["RATE_LIMIT_BACKEND"] = "memory"

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from gestion_camareros.cache import InMemoryRateLimiter, get_rate_limiter  # noqa: E402
from gestion_camareros.main import app  # noqa: E402
from gestion_camareros.models import Base, get_db  # noqa: E402

SQLALCHEMY_TEST_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_TEST_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Límite alto: los tests no deben toparse con el rate limiting salvo que lo busquen
test_limiter = InMemoryRateLimiter(max_requests=10_000, window_seconds=60)


def override_get_db():
    """Override database dependency"""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_rate_limiter] = lambda: test_limiter


@pytest.fixture(autouse=True)
def setup_database():
    """Crear y limpiar base de datos antes de cada test"""
    Base.metadata.create_all(bind=engine)
    test_limiter.reset()
    yield
    Base.metadata.drop_all(bind=engine)

