import asyncio

from doubles import FlakyGateway
from painel.api.deps import get_gateway
from painel.core.config import Settings, get_settings
from painel.main import app


def _seed(gateway, collection, doc_id, data):
    asyncio.run(gateway.set(collection, doc_id, data))


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_customer_crud(client, gateway):
    res = client.post("/api/clientes", json={"name": "Acme", "document": "123"})
    assert res.status_code == 201
    new_id = res.json()["id"]

    body = client.get("/api/clientes").json()
    assert body["total"] == 1
    assert body["items"][0]["name"] == "Acme"
    assert client.get("/api/clientes", params={"q": "zzz"}).json()["total"] == 0

    res = client.put(f"/api/clientes/{new_id}", json={"name": "Acme SA"})
    assert res.status_code == 200
    assert res.json()["name"] == "Acme SA"

    assert client.delete(f"/api/clientes/{new_id}").status_code == 204
    assert client.get("/api/clientes").json()["total"] == 0


def test_missing_customer_is_404(client):
    assert client.put("/api/clientes/nope", json={"name": "X"}).status_code == 404
    assert client.delete("/api/clientes/nope").status_code == 404


def test_blank_name_is_422(client):
    assert client.post("/api/clientes", json={"name": " "}).status_code == 422


def test_duplicate_form_token_is_409(client, gateway):
    headers = {"X-Form-Token": "tok-api-1"}
    assert client.post("/api/clientes", json={"name": "Acme"}, headers=headers).status_code == 201
    assert client.post("/api/clientes", json={"name": "Acme"}, headers=headers).status_code == 409
    assert len(asyncio.run(gateway.list("clientes"))) == 1


def test_read_failure_is_502(client):
    app.dependency_overrides[get_gateway] = lambda: FlakyGateway(fail_reads=True)
    res = client.get("/api/maquinas")
    assert res.status_code == 502
    assert "Erro ao carregar maquinas" in res.json()["detail"]


def test_write_failure_is_502(client):
    app.dependency_overrides[get_gateway] = lambda: FlakyGateway(fail_writes=True)
    res = client.post("/api/solventes", json={"code": "S-1"})
    assert res.status_code == 502
    assert "Erro ao salvar solvente" in res.json()["detail"]


def test_machines_report_orphans(client, gateway):
    _seed(gateway, "clientes", "c1", {"nome": "Acme"})
    client.post("/api/maquinas", json={"customer_id": "c1", "manufacturer": "Fab", "model": "A", "serial_number": "1"})
    client.post("/api/maquinas", json={"manufacturer": "Fab", "model": "B", "serial_number": "2"})

    body = client.get("/api/maquinas").json()
    assert body["orphans"] == 1
    assert [(m["model"], m["cliente"], m["orphan"]) for m in body["items"]] == [
        ("A", "Acme", False),
        ("B", "[Sem Cliente]", True),
    ]


def test_reports_grouped(client, gateway):
    _seed(gateway, "clientes", "c1", {"nome": "Acme"})
    _seed(gateway, "maquinas", "m1", {"cliente_id": "c1", "fabricante": "Fab", "modelo": "Model"})
    res = client.post(
        "/api/relatorios",
        json={"customer_id": "c1", "machine_id": "m1", "title": "Visita", "description": "Limpeza"},
    )
    assert res.status_code == 201
    _seed(gateway, "relatorios", "r-orfao", {"titulo": "Sem cliente", "descricao": "x"})

    body = client.get("/api/relatorios").json()
    assert body["counts"] == {"relatorios": 2, "clientes": 1, "maquinas": 1}
    assert [g["titulo"] for g in body["groups"]] == ["Acme", "[Sem Cliente]"]
    report = body["groups"][0]["relatorios"][0]
    assert report["maquina"] == "Fab Model"
    assert report["technician_name"] == "Ana Tecnica"


def test_report_machine_mismatch_is_422(client, gateway):
    _seed(gateway, "clientes", "c1", {"nome": "Acme"})
    _seed(gateway, "maquinas", "m9", {"cliente_id": "c2", "modelo": "X"})
    res = client.post(
        "/api/relatorios",
        json={"customer_id": "c1", "machine_id": "m9", "title": "T", "description": "D"},
    )
    assert res.status_code == 422


def test_derived_fields(client, gateway, distance_lookup):
    settings = Settings()
    settings.TECH_BASE_LAT = -23.55
    settings.TECH_BASE_LNG = -46.63
    app.dependency_overrides[get_settings] = lambda: settings
    distance_lookup.meters = 10000
    _seed(gateway, "clientes", "c1", {"nome": "Acme", "celular": "11999", "latitude": -23.0, "longitude": -46.0})
    _seed(gateway, "maquinas", "m1", {"clienteId": "c1", "fabricante": "Fab", "modelo": "Model"})

    body = client.get("/api/relatorios/derivados", params={"cliente_id": "c1", "maquina_id": "m7"}).json()
    assert body == {
        "contato": "11999",
        "kmQuantidade": 24,
        "maquinaId": "",
        "maquinas": [{"id": "m1", "label": "Fab Model"}],
    }


def test_paints_by_code(client):
    client.post("/api/tintas", json={"code": "T-2", "description": "Azul", "color_hex": "#0000ff"})
    client.post("/api/tintas", json={"code": "T-1", "description": "Branco"})
    body = client.get("/api/tintas").json()
    assert [p["code"] for p in body["items"]] == ["T-1", "T-2"]

    res = client.put("/api/tintas/T-2", json={"code": "T-2", "description": "Azul royal"})
    assert res.json()["description"] == "Azul royal"
    assert client.delete("/api/tintas/T-1").status_code == 204
    assert client.get("/api/tintas").json()["total"] == 1


def test_address_endpoints_disabled_without_key(client):
    assert client.get("/api/enderecos/sugestoes", params={"q": "Rua"}).json() == {"enabled": False, "items": []}


def test_report_edit_keeps_foreign_status(client, gateway):
    _seed(gateway, "clientes", "c1", {"nome": "Acme"})
    _seed(gateway, "relatorios", "r1", {"clienteId": "c1", "titulo": "App", "descricao": "x", "status": "AGUARDANDO PECA"})
    payload = {"customer_id": "c1", "title": "App 2", "description": "x", "status": "AGUARDANDO PECA"}
    res = client.put("/api/relatorios/r1", json=payload)
    assert res.status_code == 200
    assert res.json()["status"] == "AGUARDANDO PECA"

    res = client.put("/api/relatorios/r1", json={**payload, "status": "ARQUIVADO"})
    assert res.status_code == 422
    assert client.post("/api/relatorios", json={**payload, "status": "ARQUIVADO"}).status_code == 422
