from jinja2 import DictLoader, Environment

_SHELL = """
<!doctype html>
<html lang="pt-br">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{{ app_name }} - {{ view.label }}</title>
  <style>
    :root {
      --bg: #f8fafc;
      --card: #ffffff;
      --text: #0f172a;
      --muted: #64748b;
      --accent: #2563eb;
      --danger: #dc2626;
      --border: #e2e8f0;
      --warn-bg: #fef9c3;
      --warn-border: #facc15;
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      display: flex;
      min-height: 100vh;
      font-family: "Inter", "Segoe UI", Arial, sans-serif;
      background: var(--bg);
      color: var(--text);
    }
    aside {
      width: 240px;
      background: var(--card);
      border-right: 1px solid var(--border);
      display: flex;
      flex-direction: column;
    }
    aside .brand { padding: 16px; font-weight: 700; border-bottom: 1px solid var(--border); }
    aside nav { padding: 12px; flex: 1; }
    aside nav a {
      display: block;
      padding: 10px 14px;
      border-radius: 8px;
      color: var(--text);
      text-decoration: none;
      font-size: 14px;
      margin-bottom: 4px;
    }
    aside nav a.active { background: #eff6ff; color: #1d4ed8; font-weight: 600; }
    aside .user { padding: 16px; border-top: 1px solid var(--border); font-size: 13px; }
    aside .user small { color: var(--muted); display: block; }
    main { flex: 1; padding: 24px 32px; }
    h1 { font-size: 22px; margin: 0 0 16px; }
    .toolbar { display: flex; gap: 12px; margin-bottom: 16px; }
    .toolbar input { flex: 1; padding: 8px 12px; border: 1px solid var(--border); border-radius: 8px; }
    .btn {
      padding: 8px 14px;
      border-radius: 8px;
      border: 1px solid var(--border);
      background: var(--card);
      color: var(--text);
      cursor: pointer;
      text-decoration: none;
      font-size: 14px;
    }
    .btn.primary { background: var(--accent); border-color: var(--accent); color: #fff; }
    .btn.danger { background: var(--danger); border-color: var(--danger); color: #fff; }
    .btn[disabled] { opacity: 0.6; cursor: wait; }
    .alert { padding: 12px 16px; border-radius: 8px; margin-bottom: 16px; font-size: 14px; }
    .alert.error { background: #fee2e2; color: #991b1b; border: 1px solid #fca5a5; }
    .alert.warn { background: var(--warn-bg); color: #854d0e; border: 1px solid var(--warn-border); }
    .counters { display: flex; gap: 12px; margin-bottom: 16px; font-size: 13px; color: var(--muted); }
    .counters span { background: var(--card); border: 1px solid var(--border); border-radius: 6px; padding: 6px 10px; }
    table { width: 100%; border-collapse: collapse; background: var(--card); border: 1px solid var(--border); }
    th { text-align: left; font-size: 11px; text-transform: uppercase; color: var(--muted); padding: 10px 16px; background: #f1f5f9; }
    td { padding: 12px 16px; font-size: 14px; border-top: 1px solid var(--border); }
    td.actions { text-align: right; white-space: nowrap; }
    td.actions a { margin-left: 8px; font-size: 13px; }
    tr.orphan td { background: var(--warn-bg); }
    .empty { text-align: center; color: var(--muted); padding: 24px; }
    .swatch { display: inline-block; width: 14px; height: 14px; border-radius: 3px; border: 1px solid var(--border); vertical-align: middle; margin-right: 6px; }
    section.group { background: var(--card); border: 1px solid var(--border); border-radius: 8px; padding: 16px; margin-bottom: 16px; }
    section.group header { display: flex; justify-content: space-between; align-items: center; cursor: pointer; }
    section.group header h3 { margin: 0; font-size: 16px; }
    section.group header small { color: var(--muted); margin-left: 8px; }
    section.group.collapsed .body { display: none; }
    .report { border: 1px solid var(--border); border-radius: 6px; padding: 10px 12px; margin-top: 10px; display: flex; justify-content: space-between; }
    .report .meta { font-size: 12px; color: var(--muted); }
    .badge { font-size: 11px; padding: 2px 8px; border-radius: 999px; background: #f1f5f9; }
    .modal-backdrop { position: fixed; inset: 0; background: rgba(0, 0, 0, 0.5); display: flex; align-items: center; justify-content: center; padding: 16px; }
    .modal { background: var(--card); border-radius: 10px; width: 100%; max-width: 720px; max-height: 90vh; overflow-y: auto; }
    .modal .head { display: flex; justify-content: space-between; align-items: center; padding: 16px 24px; border-bottom: 1px solid var(--border); }
    .modal .head h2 { margin: 0; font-size: 18px; }
    .modal form, .modal .content { padding: 20px 24px; }
    .grid { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; }
    .grid .wide { grid-column: span 2; }
    label { display: block; font-size: 13px; font-weight: 600; margin-bottom: 4px; }
    .field input, .field select, .field textarea { width: 100%; padding: 8px 10px; border: 1px solid var(--border); border-radius: 8px; font: inherit; }
    .field textarea { min-height: 90px; }
    .note { font-size: 12px; color: var(--muted); margin-top: 12px; }
    .buttons { display: flex; gap: 12px; margin-top: 20px; }
    .buttons > * { flex: 1; text-align: center; }
  </style>
</head>
<body>
  <aside>
    <div class="brand">{{ app_name }}</div>
    <nav>
      {% for key, label in tabs %}
      <a href="/?aba={{ key }}" class="{{ 'active' if key == view.key else '' }}">{{ label }}</a>
      {% endfor %}
    </nav>
    <div class="user"><small>Usuario</small>{{ user_label or '-' }}</div>
  </aside>
  <main>
    <h1>{{ view.label }}</h1>
    {% if error %}<div class="alert error" role="alert">{{ error }}</div>{% endif %}
    {% if banner %}<div class="alert warn"><strong>Atencao: Maquinas sem Cliente.</strong> {{ banner }}</div>{% endif %}

    <form class="toolbar" method="get" action="/">
      <input type="hidden" name="aba" value="{{ view.key }}" />
      <input type="search" name="q" value="{{ q }}" placeholder="Buscar {{ view.label | lower }}..." id="busca" autocomplete="off" />
      <a class="btn primary" href="/?aba={{ view.key }}&novo=1">Novo {{ view.singular }}</a>
    </form>

    {% if counts %}
    <div class="counters">
      <span>Relatorios: <strong>{{ counts.relatorios }}</strong></span>
      <span>Clientes: <strong>{{ counts.clientes }}</strong></span>
      <span>Maquinas: <strong>{{ counts.maquinas }}</strong></span>
    </div>
    {% endif %}

    {% if groups is not none %}
      {% if not groups %}<div class="alert warn">Nenhum cliente cadastrado.</div>{% endif %}
      {% for group in groups %}
      <section class="group">
        <header onclick="this.parentElement.classList.toggle('collapsed')">
          <div><h3 style="display:inline">{{ group.title }}</h3><small>{{ group.rows | length }} relatorio(s)</small></div>
          {% if group.customer_id %}<a class="btn primary" href="/?aba=relatorios&novo=1&cliente={{ group.customer_id }}" onclick="event.stopPropagation()">Novo</a>{% endif %}
        </header>
        <div class="body">
          {% if not group.rows %}<div class="meta empty">Nenhum relatorio para este cliente.</div>{% endif %}
          {% for row in group.rows %}
          <div class="report" data-search="{{ row.search }}">
            <div>
              <div>{{ row.cells[0].text }}</div>
              <div class="meta">{{ row.cells[1].text }} &bull; {{ row.cells[2].text }} &bull; <span class="badge">{{ row.cells[3].text }}</span></div>
            </div>
            <div>
              <a href="/?aba=relatorios&ver={{ row.id }}">Ver</a>
              <a href="/?aba=relatorios&editar={{ row.id }}">Editar</a>
              <a href="/?aba=relatorios&excluir={{ row.id }}" style="color: var(--danger)">Excluir</a>
            </div>
          </div>
          {% endfor %}
        </div>
      </section>
      {% endfor %}
    {% else %}
    <table>
      <thead>
        <tr>{% for header in view.headers %}<th>{{ header }}</th>{% endfor %}<th style="text-align:right">Acoes</th></tr>
      </thead>
      <tbody>
        {% for row in rows %}
        <tr class="{{ row.row_class }}" data-search="{{ row.search }}">
          {% for cell in row.cells %}
          <td>{% if cell.color %}<span class="swatch" style="background: {{ cell.color }}"></span>{% endif %}{{ cell.text }}</td>
          {% endfor %}
          <td class="actions">
            <a href="/?aba={{ view.key }}&editar={{ row.id | urlencode }}">Editar</a>
            <a href="/?aba={{ view.key }}&excluir={{ row.id | urlencode }}" style="color: var(--danger)">Excluir</a>
          </td>
        </tr>
        {% else %}
        <tr><td colspan="{{ view.headers | length + 1 }}" class="empty">Nenhum registro encontrado</td></tr>
        {% endfor %}
      </tbody>
    </table>
    {% endif %}
  </main>

  {% if form_open %}
  <div class="modal-backdrop">
    <div class="modal">
      <div class="head">
        <h2>{{ 'Editar' if editing_id else 'Novo' }} {{ view.singular }}</h2>
        <a class="btn" href="/?aba={{ view.key }}">Fechar</a>
      </div>
      <form method="post" action="/painel/{{ view.key }}/salvar" id="form-registro">
        <input type="hidden" name="_token" value="{{ token or '' }}" />
        <input type="hidden" name="_editing" value="{{ editing_id or '' }}" />
        <div class="grid">
          {% for field in fields %}
            {% set value = values.get(field.name, '') %}
            {% if field.kind == 'hidden' %}
            <input type="hidden" name="{{ field.name }}" id="campo-{{ field.name }}" value="{{ value }}" />
            {% else %}
            <div class="field {{ 'wide' if field.wide else '' }}">
              <label for="campo-{{ field.name }}">{{ field.label }}{{ ' *' if field.required else '' }}</label>
              {% if field.kind == 'select' %}
              <select name="{{ field.name }}" id="campo-{{ field.name }}" {{ 'required' if field.required else '' }}>
                {% for option_value, option_label in field.options %}
                <option value="{{ option_value }}" {{ 'selected' if option_value == value else '' }}>{{ option_label }}</option>
                {% endfor %}
              </select>
              {% elif field.kind == 'textarea' %}
              <textarea name="{{ field.name }}" id="campo-{{ field.name }}" {{ 'required' if field.required else '' }}>{{ value }}</textarea>
              {% elif field.kind == 'checkbox' %}
              <input type="checkbox" name="{{ field.name }}" id="campo-{{ field.name }}" style="width:auto" {{ 'checked' if value else '' }} />
              {% elif field.kind == 'address' %}
              <input type="text" name="{{ field.name }}" id="campo-{{ field.name }}" value="{{ value }}" list="sugestoes-endereco" placeholder="{{ field.placeholder }}" autocomplete="off" data-autocomplete="1" />
              <datalist id="sugestoes-endereco"></datalist>
              {% else %}
              <input type="{{ field.kind }}" name="{{ field.name }}" id="campo-{{ field.name }}" value="{{ value }}"
                {{ 'step=any' if field.kind == 'number' else '' }}
                {{ 'required' if field.required else '' }}
                {{ 'readonly' if field.readonly else '' }}
                placeholder="{{ field.placeholder }}" />
              {% endif %}
            </div>
            {% endif %}
          {% endfor %}
        </div>
        {% if technician %}<div class="note">Tecnico responsavel: {{ technician }} (definido automaticamente ao salvar)</div>{% endif %}
        <div class="buttons">
          <a class="btn" href="/?aba={{ view.key }}">Cancelar</a>
          <button type="submit" class="btn primary">{{ 'Atualizar' if editing_id else 'Criar' }}</button>
        </div>
      </form>
    </div>
  </div>
  {% endif %}

  {% if confirm %}
  <div class="modal-backdrop">
    <div class="modal" style="max-width: 420px">
      <div class="head"><h2>Confirmar exclusao</h2></div>
      <form method="post" action="/painel/{{ view.key }}/{{ confirm.id | urlencode }}/excluir">
        <input type="hidden" name="confirmado" value="1" />
        <p>Tem certeza que deseja excluir {{ confirm.text }}?</p>
        <div class="buttons">
          <a class="btn" href="/?aba={{ view.key }}">Cancelar</a>
          <button type="submit" class="btn danger">Excluir</button>
        </div>
      </form>
    </div>
  </div>
  {% endif %}

  {% if detail %}
  <div class="modal-backdrop">
    <div class="modal">
      <div class="head">
        <h2>{{ detail.titulo }}</h2>
        <a class="btn" href="/?aba={{ view.key }}">Fechar</a>
      </div>
      <div class="content grid">
        {% for label, value in detail.campos %}
        <div class="field"><label>{{ label }}</label><div>{{ value }}</div></div>
        {% endfor %}
      </div>
    </div>
  </div>
  {% endif %}

  <script>
    (function () {
      var busca = document.getElementById("busca");
      if (busca) {
        busca.addEventListener("input", function () {
          var termo = busca.value.trim().toLowerCase();
          document.querySelectorAll("[data-search]").forEach(function (el) {
            el.style.display = !termo || el.dataset.search.indexOf(termo) !== -1 ? "" : "none";
          });
        });
      }

      var form = document.getElementById("form-registro");
      if (form) {
        form.addEventListener("submit", function () {
          var botao = form.querySelector("button[type=submit]");
          if (botao) { botao.disabled = true; }
        });
      }

      var endereco = document.querySelector("[data-autocomplete]");
      if (endereco) {
        var lista = document.getElementById("sugestoes-endereco");
        var lugares = {};
        endereco.addEventListener("input", function () {
          var texto = endereco.value;
          if (lugares[texto]) {
            fetch("/api/enderecos/detalhes?place_id=" + encodeURIComponent(lugares[texto]))
              .then(function (r) { return r.json(); })
              .then(function (data) {
                var a = data.address;
                if (!a) { return; }
                endereco.value = a.formatted || endereco.value;
                if (a.city) { document.getElementById("campo-city").value = a.city; }
                if (a.state) { document.getElementById("campo-state").value = a.state; }
                if (a.latitude !== null && a.longitude !== null) {
                  document.getElementById("campo-latitude").value = a.latitude;
                  document.getElementById("campo-longitude").value = a.longitude;
                }
              })
              .catch(function (e) { console.warn("detalhes do endereco", e); });
            return;
          }
          if (texto.length < 3) { return; }
          fetch("/api/enderecos/sugestoes?q=" + encodeURIComponent(texto))
            .then(function (r) { return r.json(); })
            .then(function (data) {
              lista.innerHTML = "";
              lugares = {};
              (data.items || []).forEach(function (item) {
                lugares[item.description] = item.place_id;
                var opt = document.createElement("option");
                opt.value = item.description;
                lista.appendChild(opt);
              });
            })
            .catch(function (e) { console.warn("autocomplete", e); });
        });
      }

      var cliente = document.querySelector("#form-registro select[name=customer_id]");
      var contato = document.getElementById("campo-contact");
      if (cliente && contato) {
        cliente.addEventListener("change", function () {
          if (!cliente.value) { return; }
          var maquina = document.getElementById("campo-machine_id");
          var url = "/api/relatorios/derivados?cliente_id=" + encodeURIComponent(cliente.value)
            + "&contato=" + encodeURIComponent(contato.value)
            + "&maquina_id=" + encodeURIComponent(maquina ? maquina.value : "");
          fetch(url)
            .then(function (r) { return r.json(); })
            .then(function (data) {
              contato.value = data.contato || "";
              if (data.kmQuantidade !== null && data.kmQuantidade !== undefined) {
                document.getElementById("campo-travel_km").value = data.kmQuantidade;
              }
              if (maquina) {
                maquina.innerHTML = '<option value="">Selecione...</option>';
                (data.maquinas || []).forEach(function (m) {
                  var opt = document.createElement("option");
                  opt.value = m.id;
                  opt.textContent = m.label;
                  opt.selected = m.id === data.maquinaId;
                  maquina.appendChild(opt);
                });
              }
            })
            .catch(function (e) { console.warn("campos derivados", e); });
        });
      }
    })();
  </script>
</body>
</html>
"""

environment = Environment(loader=DictLoader({"shell.html": _SHELL}), autoescape=True)


def render_shell(**context) -> str:
    return environment.get_template("shell.html").render(**context)
