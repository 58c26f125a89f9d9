import asyncio
import unittest

from pydantic import ValidationError

from painel.gateway.memory import MemoryGateway
from painel.managers.base import SubmitGuard
from painel.managers.machines import MachineForm, MachineManager


def _manager(gateway):
    return MachineManager(gateway, "maquinas", "clientes", guard=SubmitGuard())


class OrphanMachineTests(unittest.TestCase):
    def setUp(self):
        self.gateway = MemoryGateway(
            {
                "clientes": {"c1": {"nome": "Acme"}},
                "maquinas": {
                    "m1": {"cliente_id": "c1", "fabricante": "Fab", "modelo": "A100", "numero_serie": "1"},
                    "m2": {"clienteId": "c1", "fabricante": "Fab", "modelo": "B200", "numeroSerie": "2"},
                    "m3": {"fabricante": "Fab", "modelo": "C300", "numero_serie": "3"},
                    "m4": {"cliente_id": "abcdefghijkl", "fabricante": "Fab", "modelo": "D400"},
                },
            }
        )
        self.manager = _manager(self.gateway)
        asyncio.run(self.manager.load())

    def test_orphan_count(self):
        self.assertEqual(self.manager.orphan_count, 1)
        self.assertEqual([m.id for m in self.manager.orphans], ["m3"])

    def test_ordered_by_model(self):
        self.assertEqual([m.model for m in self.manager.items], ["A100", "B200", "C300", "D400"])

    def test_customer_labels(self):
        self.assertEqual(self.manager.customer_label("c1"), "Acme")
        self.assertEqual(self.manager.customer_label(""), "[Sem Cliente]")
        self.assertEqual(self.manager.customer_label("abcdefghijkl"), "[ID: abcdefgh...]")

    def test_assigning_customer_clears_orphan(self):
        self.manager.open_form(self.manager.find("m3"))
        form = self.manager.form.model_copy(update={"customer_id": "c1"})
        asyncio.run(self.manager.submit(MachineForm.model_validate(form.model_dump())))

        self.assertEqual(self.manager.orphan_count, 0)
        raw = self.gateway.raw("maquinas", "m3")
        self.assertEqual(raw["cliente_id"], "c1")
        self.assertEqual(raw["clienteId"], "c1")

    def test_search_by_serial(self):
        self.assertEqual([m.id for m in self.manager.filtered("2")], ["m2"])


class MachineFormTests(unittest.TestCase):
    def test_required_fields(self):
        with self.assertRaises(ValidationError):
            MachineForm(manufacturer="Fab", model="", serial_number="1")

    def test_blank_year_and_default_active(self):
        form = MachineForm(manufacturer="Fab", model="X", serial_number="1", manufacture_year="")
        self.assertIsNone(form.manufacture_year)
        self.assertTrue(form.active)

    def test_create_without_customer_is_allowed(self):
        gateway = MemoryGateway()
        manager = _manager(gateway)
        manager.open_form()
        new_id = asyncio.run(manager.submit(MachineForm(manufacturer="Fab", model="X", serial_number="9")))
        self.assertEqual(manager.orphan_count, 1)
        self.assertEqual(gateway.raw("maquinas", new_id)["numeroSerie"], "9")
