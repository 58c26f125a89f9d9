import asyncio

from doubles import FlakyGateway
from painel.api.deps import get_gateway
from painel.main import app


def _seed(gateway, collection, doc_id, data):
    asyncio.run(gateway.set(collection, doc_id, data))


def test_shell_lists_tabs(client):
    res = client.get("/")
    assert res.status_code == 200
    for label in ("Clientes", "Maquinas", "Relatorios", "Tintas", "Solventes"):
        assert label in res.text
    assert "Ana Tecnica" in res.text
    assert "Nenhum registro encontrado" in res.text


def test_unknown_tab_is_404(client):
    assert client.get("/", params={"aba": "estoque"}).status_code == 404


def test_customer_form_without_maps_key(client):
    res = client.get("/", params={"aba": "clientes", "novo": "1"})
    assert res.status_code == 200
    assert "Configure GOOGLE_MAPS_API_KEY para autocompletar" in res.text
    assert 'data-autocomplete="1"' not in res.text
    assert '<input type="text" name="address" id="campo-address"' in res.text


def test_customer_form_with_autocomplete(client, address_lookup):
    address_lookup.configured = True
    res = client.get("/", params={"aba": "clientes", "novo": "1"})
    assert "data-autocomplete" in res.text
    assert "Endereco (Google)" in res.text


def test_save_redirects_and_lists(client, gateway):
    res = client.post(
        "/painel/clientes/salvar",
        data={"_token": "tok-1", "_editing": "", "name": "Acme", "phone": "1133"},
        follow_redirects=False,
    )
    assert res.status_code == 303
    assert res.headers["location"] == "/?aba=clientes"
    assert "Acme" in client.get("/", params={"aba": "clientes"}).text

    again = client.post(
        "/painel/clientes/salvar",
        data={"_token": "tok-1", "_editing": "", "name": "Acme", "phone": "1133"},
        follow_redirects=False,
    )
    assert again.status_code == 303
    assert len(asyncio.run(gateway.list("clientes"))) == 1


def test_invalid_form_is_rendered_again(client, gateway):
    res = client.post("/painel/clientes/salvar", data={"name": "", "phone": "1133"})
    assert res.status_code == 422
    assert "Formulario invalido" in res.text
    assert 'value="1133"' in res.text
    assert asyncio.run(gateway.list("clientes")) == []


def test_write_failure_keeps_form(client):
    app.dependency_overrides[get_gateway] = lambda: FlakyGateway(fail_writes=True)
    res = client.post("/painel/solventes/salvar", data={"code": "S-1", "description": "Thinner"})
    assert res.status_code == 502
    assert "Erro ao salvar solvente" in res.text
    assert 'value="Thinner"' in res.text


def test_read_failure_shows_error(client):
    app.dependency_overrides[get_gateway] = lambda: FlakyGateway(fail_reads=True)
    res = client.get("/", params={"aba": "clientes"})
    assert res.status_code == 200
    assert "Erro ao carregar clientes" in res.text


def test_edit_machine_checkbox(client, gateway):
    _seed(gateway, "maquinas", "m1", {"fabricante": "Fab", "modelo": "X", "numero_serie": "1", "ativo": True})
    res = client.post(
        "/painel/maquinas/salvar",
        data={"_editing": "m1", "manufacturer": "Fab", "model": "X", "serial_number": "1"},
        follow_redirects=False,
    )
    assert res.status_code == 303
    raw = gateway.raw("maquinas", "m1")
    assert raw["ativo"] is False
    assert raw["numeroSerie"] == "1"


def test_orphan_banner(client, gateway):
    _seed(gateway, "maquinas", "m1", {"fabricante": "Fab", "modelo": "X"})
    res = client.get("/", params={"aba": "maquinas"})
    assert "Existem 1 maquina(s) sem cliente vinculado" in res.text
    assert 'class="orphan"' in res.text


def test_delete_needs_confirmation(client, gateway):
    _seed(gateway, "clientes", "c1", {"nome": "Acme"})
    page = client.get("/", params={"aba": "clientes", "excluir": "c1"})
    assert "Tem certeza que deseja excluir este cliente?" in page.text

    client.post("/painel/clientes/c1/excluir", data={}, follow_redirects=False)
    assert gateway.raw("clientes", "c1") is not None

    res = client.post("/painel/clientes/c1/excluir", data={"confirmado": "1"}, follow_redirects=False)
    assert res.status_code == 303
    assert gateway.raw("clientes", "c1") is None


def test_reports_grouped_with_new_link(client, gateway):
    _seed(gateway, "clientes", "c1", {"nome": "Acme"})
    _seed(gateway, "relatorios", "r1", {"clienteId": "c1", "titulo": "Revisao", "descricao": "ok"})
    _seed(gateway, "relatorios", "r2", {"titulo": "Perdido", "descricao": "x"})
    res = client.get("/", params={"aba": "relatorios"})
    assert "[Sem Cliente]" in res.text
    assert "/?aba=relatorios&novo=1&cliente=c1" in res.text
    assert "Revisao" in res.text


def test_new_report_for_customer(client, gateway):
    _seed(gateway, "clientes", "c1", {"nome": "Acme", "telefone": "1133"})
    res = client.get("/", params={"aba": "relatorios", "novo": "1", "cliente": "c1"})
    assert res.status_code == 200
    assert "Tecnico responsavel: Ana Tecnica" in res.text
    assert 'value="1133"' in res.text
    assert '<option value="c1" selected>' in res.text


def test_edit_report_keeps_foreign_status_option(client, gateway):
    _seed(gateway, "clientes", "c1", {"nome": "Acme"})
    _seed(gateway, "relatorios", "r1", {"clienteId": "c1", "titulo": "App", "descricao": "x", "status": "AGUARDANDO PECA"})
    res = client.get("/", params={"aba": "relatorios", "editar": "r1"})
    assert '<option value="AGUARDANDO PECA" selected>' in res.text
    assert '<option value="RASCUNHO" >' in res.text
