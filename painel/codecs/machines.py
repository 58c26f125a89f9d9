"""Machine documents are written by the web client in snake_case and by the
mobile app in camelCase. Reads prefer snake_case; writes carry both."""

from typing import Any

from painel.codecs.fields import as_bool, as_datetime, as_int, as_text, first_present
from painel.gateway.base import Document
from painel.models import Machine

SNAKE_KEYS = {
    "customer_id": "cliente_id",
    "manufacturer": "fabricante",
    "model": "modelo",
    "serial_number": "numero_serie",
    "identification": "identificacao",
    "configuration_code": "codigo_configuracao",
    "manufacture_year": "ano_fabricacao",
    "active": "ativo",
}

CAMEL_KEYS = {
    "customer_id": "clienteId",
    "manufacturer": "fabricante",
    "model": "modelo",
    "serial_number": "numeroSerie",
    "identification": "identificacao",
    "configuration_code": "codigoConfiguracao",
    "manufacture_year": "anoFabricacao",
    "active": "ativo",
}

# older mobile builds
LEGACY_KEYS = {"identification": "identification"}


def _read(data: dict[str, Any], field: str, default: Any = None) -> Any:
    keys = [SNAKE_KEYS[field], CAMEL_KEYS[field]]
    if field in LEGACY_KEYS:
        keys.append(LEGACY_KEYS[field])
    return first_present(data, *keys, default=default)


def decode(doc: Document) -> Machine:
    data = doc.data
    return Machine(
        id=doc.id,
        customer_id=as_text(_read(data, "customer_id", "")),
        manufacturer=as_text(_read(data, "manufacturer", "")),
        model=as_text(_read(data, "model", "")),
        serial_number=as_text(_read(data, "serial_number", "")),
        identification=as_text(_read(data, "identification", "")),
        configuration_code=as_text(_read(data, "configuration_code", "")),
        manufacture_year=as_int(_read(data, "manufacture_year")),
        active=as_bool(_read(data, "active"), default=True),
        created_at=as_datetime(data.get("created_at")),
    )


def encode(machine: Machine) -> dict[str, Any]:
    values = {
        "customer_id": machine.customer_id,
        "manufacturer": machine.manufacturer,
        "model": machine.model,
        "serial_number": machine.serial_number,
        "identification": machine.identification or None,
        "configuration_code": machine.configuration_code or None,
        "manufacture_year": machine.manufacture_year,
        "active": machine.active,
    }
    snake = {SNAKE_KEYS[field]: value for field, value in values.items()}
    camel = {CAMEL_KEYS[field]: value for field, value in values.items()}
    return {**snake, **camel}
