from typing import Any

from painel.codecs.fields import as_datetime, as_text, coordinate_pair, first_present
from painel.gateway.base import Document
from painel.models import Customer


def decode(doc: Document) -> Customer:
    data = doc.data
    latitude, longitude = coordinate_pair(
        first_present(data, "latitude", "lat", "latitude_raw"),
        first_present(data, "longitude", "lng", "longitude_raw"),
    )
    return Customer(
        id=doc.id,
        name=as_text(data.get("nome")),
        document=as_text(first_present(data, "documento", "cnpjCpf", default="", skip_empty=True)),
        phone=as_text(first_present(data, "telefone", "telefone1", "celular", default="", skip_empty=True)),
        mobile=as_text(first_present(data, "celular", "telefone", default="", skip_empty=True)),
        email=as_text(data.get("email")),
        address=as_text(first_present(data, "endereco", "address", default="", skip_empty=True)),
        number=as_text(data.get("numero")),
        complement=as_text(data.get("complemento")),
        city=as_text(data.get("cidade")),
        state=as_text(data.get("estado")),
        latitude=latitude,
        longitude=longitude,
        created_at=as_datetime(data.get("created_at")),
    )


def encode(customer: Customer) -> dict[str, Any]:
    """Mobile key set, plus ``documento`` for the web reader."""
    latitude, longitude = coordinate_pair(customer.latitude, customer.longitude)
    return {
        "nome": customer.name,
        "cnpjCpf": customer.document,
        "celular": customer.phone,
        "telefone": customer.phone,
        "endereco": customer.address,
        "numero": customer.number,
        "complemento": customer.complement,
        "cidade": customer.city,
        "estado": customer.state,
        "latitude": latitude,
        "longitude": longitude,
        "email": customer.email,
        "documento": customer.document,
    }
