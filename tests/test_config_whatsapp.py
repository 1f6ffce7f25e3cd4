"""
Tests de la verificación de credenciales de WhatsApp Business
"""
from fastapi.testclient import TestClient

from gestion_camareros.config import settings
from gestion_camareros.main import app
from gestion_camareros.services import EstadoConfigWhatsApp, clasificar_config_whatsapp

client = TestClient(app)

HEADERS = {"Authorization": "Bearer test-token"}

PHONE_ID = "123456789012345"
API_KEY = "EAA" + "x" * 250


def test_configuracion_correcta():
    resultado = clasificar_config_whatsapp(PHONE_ID, API_KEY)
    assert resultado.estado == EstadoConfigWhatsApp.CONFIGURED
    assert resultado.configurado is True


def test_valores_identicos():
    resultado = clasificar_config_whatsapp(API_KEY, API_KEY)
    assert resultado.estado == EstadoConfigWhatsApp.DUPLICATE_VALUES
    assert resultado.configurado is False


def test_valores_intercambiados():
    resultado = clasificar_config_whatsapp(API_KEY, PHONE_ID)
    assert resultado.estado == EstadoConfigWhatsApp.SUSPICIOUS_TOKEN
    assert "intercambiados" in resultado.detalle


def test_token_corto():
    resultado = clasificar_config_whatsapp(PHONE_ID, "EAA" + "x" * 50)
    assert resultado.estado == EstadoConfigWhatsApp.SUSPICIOUS_TOKEN


def test_phone_id_no_numerico():
    resultado = clasificar_config_whatsapp("mi-telefono", API_KEY)
    assert resultado.estado == EstadoConfigWhatsApp.SUSPICIOUS_TOKEN


def test_sin_configurar():
    assert clasificar_config_whatsapp("", "").estado == EstadoConfigWhatsApp.UNCONFIGURED
    assert clasificar_config_whatsapp(None, API_KEY).estado == EstadoConfigWhatsApp.UNCONFIGURED
    assert clasificar_config_whatsapp(PHONE_ID, API_KEY, configurado=False).estado == EstadoConfigWhatsApp.UNCONFIGURED


def test_endpoint_verificar_config(monkeypatch):
    monkeypatch.setattr(settings, "WHATSAPP_PHONE_ID", PHONE_ID)
    monkeypatch.setattr(settings, "WHATSAPP_API_KEY", API_KEY)

    response = client.get("/api/v1/verificar-whatsapp-config", headers=HEADERS)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["estado"] == "configured"
    assert data["configurado"] is True
    assert data["longitud_token"] == 253


def test_endpoint_verificar_config_sin_credenciales():
    response = client.get("/api/v1/verificar-whatsapp-config", headers=HEADERS)
    data = response.json()["data"]
    assert data["estado"] == "unconfigured"
    assert data["configurado"] is False
