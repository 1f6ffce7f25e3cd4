"""
Tests de pedidos, entidades de referencia e informes
"""
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from gestion_camareros.main import app
from gestion_camareros.models import get_db

client = TestClient(app)

API = "/api/v1"
HEADERS = {"Authorization": "Bearer test-token"}

PEDIDO = {
    "numero": "2024-031",
    "cliente": "Hotel Miramar",
    "lugar": "Salón Mediterráneo",
    "dia_evento": "2024-03-15",
    "cantidad_camareros": 2,
    "hora_entrada": "18:00",
    "hora_salida": "23:30",
    "cantidad_camareros_2": 1,
    "hora_entrada_2": "20:00",
    "hora_salida_2": "01:00",
    "catering": True,
    "tiempo_viaje": 30,
    "camisa": "negra"
}


def test_health_check():
    """Test del health check"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ["healthy", "unhealthy"]
    assert data["service"] == "Gestión de Camareros - API"


# ============================================================================
# ENTIDADES DE REFERENCIA
# ============================================================================

def test_numeracion_de_camareros():
    """Cada camarero nuevo recibe el siguiente número"""
    numeros = []
    for nombre, email in (("Lucía", "lucia@camareros.es"), ("Pablo", "pablo@camareros.es")):
        response = client.post(
            f"{API}/camareros",
            json={"nombre": nombre, "email": email},
            headers=HEADERS
        )
        assert response.status_code == 200
        numeros.append(response.json()["data"]["numero"])
    assert numeros == [1, 2]


def test_camarero_email_invalido():
    response = client.post(f"{API}/camareros", json={"nombre": "Lucía", "email": "no-es-email"}, headers=HEADERS)
    assert response.status_code == 422
    assert "email" in response.json()["error"]


def test_filtrar_camareros_activos():
    client.post(f"{API}/camareros", json={"nombre": "Lucía"}, headers=HEADERS)
    inactivo = client.post(f"{API}/camareros", json={"nombre": "Pablo"}, headers=HEADERS).json()["data"]
    client.put(f"{API}/camareros/{inactivo['id']}", json={"activo": False}, headers=HEADERS)

    response = client.get(f"{API}/camareros", params={"activo": True}, headers=HEADERS)
    assert [c["nombre"] for c in response.json()["data"]] == ["Lucía"]


def test_crud_coordinador():
    creado = client.post(
        f"{API}/coordinadores", json={"nombre": "Marta", "telefono": "600111222"}, headers=HEADERS
    ).json()["data"]
    assert creado["numero"] == 1

    actualizado = client.put(
        f"{API}/coordinadores/{creado['id']}", json={"telefono": "600333444"}, headers=HEADERS
    ).json()["data"]
    assert actualizado["telefono"] == "600333444"

    assert client.delete(f"{API}/coordinadores/{creado['id']}", headers=HEADERS).status_code == 200
    assert client.get(f"{API}/coordinadores/{creado['id']}", headers=HEADERS).status_code == 404


def test_crud_cliente():
    creado = client.post(f"{API}/clientes", json={"nombre": "Hotel Miramar"}, headers=HEADERS).json()["data"]
    listado = client.get(f"{API}/clientes", headers=HEADERS).json()["data"]
    assert [c["id"] for c in listado] == [creado["id"]]


# ============================================================================
# PEDIDOS
# ============================================================================

def test_crear_pedido_con_asignaciones():
    """Los indicadores de cobertura se derivan de las asignaciones"""
    datos = {
        **PEDIDO,
        "asignaciones": [
            {"camarero_id": 1, "camarero_nombre": "Lucía", "estado": "confirmado"},
            {"camarero_id": 2, "camarero_nombre": "Pablo", "estado": "enviado"}
        ]
    }
    response = client.post(f"{API}/pedidos", json=datos, headers=HEADERS)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["camareros_necesarios"] == 3
    assert data["confirmados"] == 1
    assert data["porcentaje_confirmacion"] == 33
    assert data["completo"] is False
    assert [a["camarero_nombre"] for a in data["asignaciones"]] == ["Lucía", "Pablo"]

    # El camarero confirmado al crear el pedido ya tiene fichaje
    fichajes = client.get(f"{API}/fichajes/{data['id']}", headers=HEADERS).json()["data"]
    assert [f["camarero_id"] for f in fichajes] == [1]


def test_pedido_sin_plantilla():
    response = client.post(f"{API}/pedidos", json={**PEDIDO, "cantidad_camareros": 0, "cantidad_camareros_2": 0}, headers=HEADERS)
    data = response.json()["data"]
    assert data["porcentaje_confirmacion"] == 0
    assert data["completo"] is False


def test_pedido_hora_invalida():
    response = client.post(f"{API}/pedidos", json={**PEDIDO, "hora_entrada": "25:00"}, headers=HEADERS)
    assert response.status_code == 422


def test_actualizar_pedido_reordena_asignaciones():
    datos = {
        **PEDIDO,
        "asignaciones": [
            {"camarero_id": 1, "camarero_nombre": "Lucía", "estado": "confirmado"},
            {"camarero_id": 2, "camarero_nombre": "Pablo"}
        ]
    }
    pedido_id = client.post(f"{API}/pedidos", json=datos, headers=HEADERS).json()["data"]["id"]

    nuevas = [
        {"camarero_id": 2, "camarero_nombre": "Pablo", "estado": "confirmado"},
        {"camarero_id": 3, "camarero_nombre": "Ana"},
        {"camarero_id": 1, "camarero_nombre": "Lucía", "estado": "confirmado"}
    ]
    response = client.put(
        f"{API}/pedidos/{pedido_id}",
        json={"lugar": "Terraza", "asignaciones": nuevas},
        headers=HEADERS
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["lugar"] == "Terraza"
    assert [a["camarero_id"] for a in data["asignaciones"]] == [2, 3, 1]
    assert data["confirmados"] == 2
    assert data["completo"] is False


def test_listar_pedidos_por_fecha():
    client.post(f"{API}/pedidos", json={**PEDIDO, "dia_evento": "2024-03-20"}, headers=HEADERS)
    client.post(f"{API}/pedidos", json={**PEDIDO, "dia_evento": "2024-03-10"}, headers=HEADERS)
    client.post(f"{API}/pedidos", json={**PEDIDO, "dia_evento": "2024-04-01"}, headers=HEADERS)

    response = client.get(f"{API}/pedidos", params={"hasta": "2024-03-31"}, headers=HEADERS)
    assert [p["dia_evento"] for p in response.json()["data"]] == ["2024-03-10", "2024-03-20"]


def test_eliminar_pedido():
    pedido_id = client.post(f"{API}/pedidos", json=PEDIDO, headers=HEADERS).json()["data"]["id"]
    assert client.delete(f"{API}/pedidos/{pedido_id}", headers=HEADERS).status_code == 200

    response = client.get(f"{API}/pedidos/{pedido_id}", headers=HEADERS)
    assert response.status_code == 404
    assert response.json() == {"success": False, "data": None, "error": "Pedido no encontrado"}


def test_eliminar_pedido_conserva_fichajes():
    """Con claves foráneas activas (como en PostgreSQL) el histórico de fichajes se mantiene"""
    engine_fk = create_engine("sqlite:///./test.db", connect_args={"check_same_thread": False})

    @event.listens_for(engine_fk, "connect")
    def activar_claves_foraneas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    SesionFK = sessionmaker(autocommit=False, autoflush=False, bind=engine_fk)

    def override_get_db_fk():
        db = SesionFK()
        try:
            yield db
        finally:
            db.close()

    anterior = app.dependency_overrides[get_db]
    app.dependency_overrides[get_db] = override_get_db_fk
    try:
        datos = {**PEDIDO, "asignaciones": [{"camarero_id": 1, "camarero_nombre": "Lucía", "estado": "confirmado"}]}
        pedido_id = client.post(f"{API}/pedidos", json=datos, headers=HEADERS).json()["data"]["id"]
        client.put(
            f"{API}/fichajes/{pedido_id}/1",
            json={"entrada": "2024-03-15T18:00:00Z", "salida": "2024-03-15T23:30:00Z"},
            headers=HEADERS
        )

        assert client.delete(f"{API}/pedidos/{pedido_id}", headers=HEADERS).status_code == 200

        fichajes = client.get(f"{API}/fichajes/{pedido_id}", headers=HEADERS).json()["data"]
        assert len(fichajes) == 1
        assert fichajes[0]["duracion"] == "5h 30min"
    finally:
        app.dependency_overrides[get_db] = anterior
        engine_fk.dispose()


def test_editar_pedido_conserva_estado_si_no_se_envia():
    """Reenviar la secuencia sin estado no restablece a los confirmados"""
    datos = {**PEDIDO, "asignaciones": [{"camarero_id": 1, "camarero_nombre": "Lucía", "estado": "confirmado"}]}
    pedido_id = client.post(f"{API}/pedidos", json=datos, headers=HEADERS).json()["data"]["id"]

    response = client.put(
        f"{API}/pedidos/{pedido_id}",
        json={"asignaciones": [{"camarero_id": 1, "camarero_nombre": "Lucía"}, {"camarero_id": 2, "camarero_nombre": "Pablo"}]},
        headers=HEADERS
    )
    assert response.status_code == 200
    assert [a["estado"] for a in response.json()["data"]["asignaciones"]] == ["confirmado", "pendiente"]


def test_editar_pedido_no_salta_transiciones():
    """confirmado -> no confirmado tampoco se permite editando el pedido completo"""
    datos = {**PEDIDO, "asignaciones": [{"camarero_id": 1, "camarero_nombre": "Lucía", "estado": "confirmado"}]}
    pedido_id = client.post(f"{API}/pedidos", json=datos, headers=HEADERS).json()["data"]["id"]

    response = client.put(
        f"{API}/pedidos/{pedido_id}",
        json={"lugar": "Terraza", "asignaciones": [{"camarero_id": 1, "camarero_nombre": "Lucía", "estado": "no confirmado"}]},
        headers=HEADERS
    )
    assert response.status_code == 400
    assert response.json()["success"] is False

    pedido = client.get(f"{API}/pedidos/{pedido_id}", headers=HEADERS).json()["data"]
    assert pedido["lugar"] == "Salón Mediterráneo"
    assert pedido["asignaciones"][0]["estado"] == "confirmado"

    # Restablecer a pendiente si es una transición válida
    response = client.put(
        f"{API}/pedidos/{pedido_id}",
        json={"asignaciones": [{"camarero_id": 1, "camarero_nombre": "Lucía", "estado": "pendiente"}]},
        headers=HEADERS
    )
    assert response.json()["data"]["asignaciones"][0]["estado"] == "pendiente"


# ============================================================================
# INFORMES
# ============================================================================

def test_informe_camarero():
    datos = {
        **PEDIDO,
        "asignaciones": [
            {"camarero_id": 5, "camarero_nombre": "Lucía", "estado": "confirmado", "hora_salida": "22:00"}
        ]
    }
    client.post(f"{API}/pedidos", json=datos, headers=HEADERS)
    client.post(f"{API}/pedidos", json={**PEDIDO, "cliente": "Otro"}, headers=HEADERS)

    response = client.get(f"{API}/informes/camarero", params={"camarero_id": 5}, headers=HEADERS)
    assert response.status_code == 200
    eventos = response.json()["data"]
    assert len(eventos) == 1
    assert eventos[0]["estado"] == "confirmado"
    assert eventos[0]["total_horas"] == "4h"
    assert eventos[0]["hora_encuentro"] == "17:20"


def test_informe_cliente():
    client.post(f"{API}/pedidos", json=PEDIDO, headers=HEADERS)
    client.post(f"{API}/pedidos", json={**PEDIDO, "cliente": "Otro"}, headers=HEADERS)

    response = client.get(f"{API}/informes/cliente", params={"cliente": "Otro"}, headers=HEADERS)
    assert [p["cliente"] for p in response.json()["data"]] == ["Otro"]
