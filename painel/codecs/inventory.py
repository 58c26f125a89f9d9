from typing import Any

from painel.codecs.fields import as_text
from painel.gateway.base import Document
from painel.models import Paint, Solvent


def decode_paint(doc: Document) -> Paint:
    data = doc.data
    return Paint(
        code=doc.id,
        description=as_text(data.get("descricao")),
        manufacturer=as_text(data.get("fabricante")),
        color_hex=as_text(data.get("cor_hex")),
    )


def encode_paint(paint: Paint) -> dict[str, Any]:
    return {
        "descricao": paint.description,
        "fabricante": paint.manufacturer,
        "cor_hex": paint.color_hex,
    }


def decode_solvent(doc: Document) -> Solvent:
    data = doc.data
    return Solvent(
        code=doc.id,
        description=as_text(data.get("descricao")),
        manufacturer=as_text(data.get("fabricante")),
    )


def encode_solvent(solvent: Solvent) -> dict[str, Any]:
    return {
        "descricao": solvent.description,
        "fabricante": solvent.manufacturer,
    }
