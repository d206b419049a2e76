"""
Unit Tests for the Form State Store
===================================
"""

import json

import pytest

from calculator_models import DEFAULT_BUDGET_ITEMS, BudgetItem, FormAnswers
from services.form_store import FormStateStore
from services.persistence import InMemoryPersistence


class TestFormStateStoreLoad:
    """Rehydration from the persistence slot."""

    def test_empty_slot_gives_defaults(self, memory_port):
        """Nothing saved means default answers."""
        store = FormStateStore(memory_port)
        assert store.answers == FormAnswers()

    def test_partial_record_merges_over_defaults(self):
        """Saved keys win; missing keys keep their defaults."""
        port = InMemoryPersistence(json.dumps({"location": "laval", "isExporting": True}))
        answers = FormStateStore(port).load()

        assert answers.location == "laval"
        assert answers.is_exporting is True
        assert answers.support_type == "any"
        assert answers.export_scope == "qc_only"
        assert len(answers.budget_items) == 3

    def test_invalid_json_gives_defaults(self, caplog):
        """Corrupt text is logged and ignored."""
        port = InMemoryPersistence("{not json")
        answers = FormStateStore(port).load()

        assert answers == FormAnswers()
        assert "not valid JSON" in caplog.text

    def test_non_object_gives_defaults(self):
        """A JSON array or string is not a record."""
        assert FormStateStore(InMemoryPersistence("[1, 2]")).load() == FormAnswers()
        assert FormStateStore(InMemoryPersistence('"hello"')).load() == FormAnswers()

    def test_wrong_types_are_coerced(self):
        """Non-list arrays become lists; non-boolean flags fall back to defaults."""
        port = InMemoryPersistence(json.dumps({
            "currentTools": "CRM",
            "projectTypes": ["ERP", 3, None],
            "reimbursementOk": "yes",
            "disclaimerAccepted": 1,
            "location": 42,
        }))
        answers = FormStateStore(port).load()

        assert answers.current_tools == []
        assert answers.project_types == ["ERP"]
        assert answers.reimbursement_ok is True
        assert answers.disclaimer_accepted is False
        assert answers.location == ""

    def test_read_error_gives_defaults(self):
        """An OSError from the port is not fatal."""
        class BrokenPort(InMemoryPersistence):
            def load(self):
                raise OSError("disk gone")

        assert FormStateStore(BrokenPort()).load() == FormAnswers()


class TestFormStateStoreUpdate:
    """Mutations persist synchronously."""

    def test_update_persists_full_record(self, memory_port):
        """Every update writes the whole record."""
        store = FormStateStore(memory_port)
        store.update(location="estrie")

        saved = json.loads(memory_port.value)
        assert saved["location"] == "estrie"
        assert saved["supportType"] == "any"
        assert memory_port.saves == 1

    def test_list_fields_replace_not_merge(self, memory_port):
        """Setting a list replaces the previous one."""
        store = FormStateStore(memory_port)
        store.update(current_tools=["CRM", "POS system"])
        store.update(current_tools=["ERP (Odoo, SAP, NetSuite, etc.)"])

        assert store.answers.current_tools == ["ERP (Odoo, SAP, NetSuite, etc.)"]

    def test_update_then_reload_round_trips(self, memory_port):
        """A fresh store over the same slot sees the same answers."""
        store = FormStateStore(memory_port)
        store.update(
            company_name="Tremblay Inc.",
            budget_items=[BudgetItem(id="1", name="ERP", cost=12500.5)],
        )

        reloaded = FormStateStore(memory_port).load()
        assert reloaded == store.answers
        assert reloaded.total_budget == 12500.5

    def test_unknown_field_raises(self, memory_port):
        """Only FormAnswers fields can be set."""
        store = FormStateStore(memory_port)
        with pytest.raises(TypeError):
            store.update(favourite_colour="blue")
        assert memory_port.saves == 0

    def test_reset_clears_slot(self, memory_port):
        """Reset returns to defaults and empties the slot."""
        store = FormStateStore(memory_port)
        store.update(location="laval")

        assert store.reset() == FormAnswers()
        assert memory_port.value is None
        assert store.answers == FormAnswers()

    def test_reset_then_load_restores_seeded_budget(self, memory_port):
        """After reset a fresh load sees the three seeded budget lines."""
        store = FormStateStore(memory_port)
        store.update(budget_items=[BudgetItem(id="9", name="Robots", cost=5000)])
        store.reset()

        answers = store.load()
        assert answers == FormAnswers()
        assert list(answers.budget_items) == list(DEFAULT_BUDGET_ITEMS)
