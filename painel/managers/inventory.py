from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from painel.codecs import inventory as codec
from painel.gateway.base import DOCUMENT_ID, Document
from painel.managers.base import EntityManager
from painel.models import Paint, Solvent


class SolventForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    code: str = Field("", min_length=1, validate_default=True)
    description: str = ""
    manufacturer: str = ""


class PaintForm(SolventForm):
    color_hex: str = ""


class _CodedManager(EntityManager):
    """Paints and solvents: the code typed by the user is the document id."""

    order_by = DOCUMENT_ID
    search_fields = ("code", "description")

    def _code(self, form: Union[PaintForm, SolventForm]) -> str:
        return self.editing.code if self.editing is not None else form.code

    async def write(self, record) -> str:
        await self.gateway.set(self.collection, record.code, self.encode(record))
        return record.code


class PaintManager(_CodedManager):
    label = "tinta"
    plural = "tintas"
    form_class = PaintForm

    def decode(self, doc: Document) -> Paint:
        return codec.decode_paint(doc)

    def encode(self, record: Paint) -> dict:
        return codec.encode_paint(record)

    def form_from_record(self, record: Paint) -> PaintForm:
        return PaintForm.model_construct(
            code=record.code,
            description=record.description,
            manufacturer=record.manufacturer,
            color_hex=record.color_hex,
        )

    async def build_record(self, form: PaintForm) -> Paint:
        return Paint(
            code=self._code(form),
            description=form.description,
            manufacturer=form.manufacturer,
            color_hex=form.color_hex,
        )


class SolventManager(_CodedManager):
    label = "solvente"
    plural = "solventes"
    form_class = SolventForm

    def decode(self, doc: Document) -> Solvent:
        return codec.decode_solvent(doc)

    def encode(self, record: Solvent) -> dict:
        return codec.encode_solvent(record)

    def form_from_record(self, record: Solvent) -> SolventForm:
        return SolventForm.model_construct(
            code=record.code,
            description=record.description,
            manufacturer=record.manufacturer,
        )

    async def build_record(self, form: SolventForm) -> Solvent:
        return Solvent(
            code=self._code(form),
            description=form.description,
            manufacturer=form.manufacturer,
        )
