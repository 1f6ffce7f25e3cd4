"""
Tests de las dependencias de seguridad de la capa de rutas
"""
from fastapi.testclient import TestClient

from gestion_camareros.cache import InMemoryRateLimiter, get_rate_limiter
from gestion_camareros.config import settings
from gestion_camareros.main import app
from gestion_camareros.utils.auth import read_token_claims

client = TestClient(app)

API = "/api/v1"
HEADERS = {"Authorization": "Bearer test-token"}


def test_sin_authorization():
    response = client.get(f"{API}/pedidos")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert "Authorization" in body["error"]


def test_con_authorization():
    response = client.get(f"{API}/pedidos", headers=HEADERS)
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": [], "error": None}


def test_secreto_requerido_en_mutaciones(monkeypatch):
    monkeypatch.setattr(settings, "FUNCTION_SECRET", "s3cr3to")

    response = client.post(f"{API}/camareros", json={"nombre": "Lucía"}, headers=HEADERS)
    assert response.status_code == 401
    assert "x-fn-secret" in response.json()["error"]

    response = client.post(
        f"{API}/camareros",
        json={"nombre": "Lucía"},
        headers={**HEADERS, "x-fn-secret": "otro"}
    )
    assert response.status_code == 401

    response = client.post(
        f"{API}/camareros",
        json={"nombre": "Lucía"},
        headers={**HEADERS, "x-fn-secret": "s3cr3to"}
    )
    assert response.status_code == 200


def test_secreto_no_aplica_a_lecturas(monkeypatch):
    monkeypatch.setattr(settings, "FUNCTION_SECRET", "s3cr3to")
    response = client.get(f"{API}/camareros", headers=HEADERS)
    assert response.status_code == 200


def test_sin_secreto_configurado_se_permite():
    response = client.post(f"{API}/camareros", json={"nombre": "Lucía"}, headers=HEADERS)
    assert response.status_code == 200


def test_enlaces_publicos_sin_cabeceras():
    """Un token inexistente da 404, no 401: la ruta no exige cabeceras"""
    response = client.get(f"{API}/confirmar/token-que-no-existe")
    assert response.status_code == 404


def test_rate_limit():
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60)
    anterior = app.dependency_overrides[get_rate_limiter]
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    try:
        assert client.get(f"{API}/pedidos", headers=HEADERS).status_code == 200
        assert client.get(f"{API}/pedidos", headers=HEADERS).status_code == 200
        response = client.get(f"{API}/pedidos", headers=HEADERS)
        assert response.status_code == 429
        assert response.json()["success"] is False

        # Otro cliente tiene su propia ventana
        otro = client.get(f"{API}/pedidos", headers={**HEADERS, "x-forwarded-for": "10.0.0.7"})
        assert otro.status_code == 200
    finally:
        app.dependency_overrides[get_rate_limiter] = anterior


def test_claims_sin_verificar():
    # {"alg":"HS256","typ":"JWT"}.{"sub":"42","role":"authenticated"}.firma
    token = (
        "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
        "eyJzdWIiOiI0MiIsInJvbGUiOiJhdXRoZW50aWNhdGVkIn0."
        "c2lnbmF0dXJh"
    )
    assert read_token_claims(token) == {"role": "authenticated", "sub": "42"}
    assert read_token_claims("no-es-un-jwt") == {"role": "anon", "sub": None}
