"""
Tests for the intent classifier.

Covers every command category, priority between overlapping vocabulary,
confidence and injected intent tables.
"""

import re

import pytest

from asis_command.classifier import DEFAULT_INTENT_TABLE, build_intent_table, classify
from asis_command.models import CommandCategory, IntentPattern


class TestCategoryClassification:
    """Test one representative phrase per category."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("vacaciones para 18866264-1 desde el lunes por 5 días", CommandCategory.VACATION),
            ("feriado legal 18866264-1 del 19 al 23 de enero", CommandCategory.VACATION),
            ("vacación para 18866264-1 mañana", CommandCategory.VACATION),
            ("licencia médica 18866264-1 desde hoy por 3 días", CommandCategory.MEDICAL_LEAVE),
            ("licencia para 18866264-1 desde hoy hasta el viernes", CommandCategory.MEDICAL_LEAVE),
            ("lic. medica 18866264-1 hoy", CommandCategory.MEDICAL_LEAVE),
            ("permiso administrativo 18866264-1 el viernes", CommandCategory.PERMISSION),
            ("permiso para 18866264-1 mañana de 10 a 12", CommandCategory.PERMISSION),
            ("llegada tardía 18866264-1 hoy a las 9:30", CommandCategory.LATE_ARRIVAL_AUTH),
            ("autorización de llegada 18866264-1 hoy a las 10", CommandCategory.LATE_ARRIVAL_AUTH),
            ("atraso 18866264-1 hoy a las 8:45", CommandCategory.LATE_ARRIVAL_AUTH),
            ("salida anticipada 18866264-1 hoy a las 16:00", CommandCategory.EARLY_DEPARTURE_AUTH),
            ("retiro anticipado 18866264-1 mañana a las 15", CommandCategory.EARLY_DEPARTURE_AUTH),
            ("necesita salir temprano 18866264-1 hoy a las 14:00", CommandCategory.EARLY_DEPARTURE_AUTH),
            ("cambio de día 18866264-1 del lunes al martes", CommandCategory.DAY_SWAP),
            ("mover turno 18866264-1 el sábado", CommandCategory.DAY_SWAP),
            ("no marcación 18866264-1 ayer", CommandCategory.NO_CLOCK_IN),
            ("olvidó marcar 18866264-1 hoy", CommandCategory.NO_CLOCK_IN),
            ("sin credencial 18866264-1 hoy", CommandCategory.NO_CREDENTIAL),
            ("olvidó la credencial 18866264-1 hoy", CommandCategory.NO_CREDENTIAL),
        ],
    )
    def test_category(self, text, expected):
        assert classify(text).category == expected

    def test_case_insensitive(self):
        assert classify("VACACIONES PARA 18866264-1").category == CommandCategory.VACATION
        assert classify("Licencia Médica").category == CommandCategory.MEDICAL_LEAVE


class TestPriority:
    """Overlapping vocabulary is resolved by priority, not by position."""

    def test_vacation_beats_permission(self):
        result = classify("permiso por vacaciones para 18866264-1")
        assert result.category == CommandCategory.VACATION

    def test_vacation_declared_before_leave_at_same_priority(self):
        result = classify("licencia por vacaciones 18866264-1")
        assert result.category == CommandCategory.VACATION

    def test_permission_beats_late_arrival(self):
        result = classify("llegada tardía con permiso 18866264-1 a las 10")
        assert result.category == CommandCategory.PERMISSION

    def test_day_swap_beats_no_clock_in(self):
        result = classify("cambio de día porque no marcó 18866264-1")
        assert result.category == CommandCategory.DAY_SWAP

    def test_table_order_does_not_matter(self):
        reversed_table = tuple(reversed(DEFAULT_INTENT_TABLE))
        result = classify("permiso por vacaciones", reversed_table)
        assert result.category == CommandCategory.VACATION


class TestConfidence:
    def test_full_match_caps_at_one(self):
        assert classify("vacaciones").confidence == 1.0

    def test_partial_match_between_bounds(self):
        result = classify("vacaciones para 18866264-1 desde el lunes por 5 días")
        assert 0.9 <= result.confidence < 1.0

    def test_confidence_formula(self):
        text = "permiso para 18866264-1 mañana"
        result = classify(text)
        assert result.confidence == pytest.approx(0.9 + (len("permiso") / len(text)) * 0.1)

    def test_most_specific_phrase_counts(self):
        short = classify("licencia para 18866264-1")
        specific = classify("licencia médica 18866264-1")
        assert specific.confidence > short.confidence


class TestUnknown:
    @pytest.mark.parametrize("text", ["", "   ", "hola", "18866264-1 el lunes", "revisar turnos de la semana"])
    def test_unknown(self, text):
        result = classify(text)
        assert result.category == CommandCategory.UNKNOWN
        assert result.confidence == 0.0


class TestInjectedTable:
    def test_custom_table(self):
        table = (
            IntentPattern(
                category=CommandCategory.NO_CREDENTIAL,
                patterns=(re.compile(r"\bcarnet\b"),),
                priority=1,
            ),
        )
        assert classify("perdió el carnet", table).category == CommandCategory.NO_CREDENTIAL
        assert classify("vacaciones", table).category == CommandCategory.UNKNOWN

    def test_empty_table(self):
        assert classify("vacaciones", ()).category == CommandCategory.UNKNOWN

    def test_build_intent_table_covers_every_category(self):
        categories = {row.category for row in build_intent_table()}
        assert categories == set(CommandCategory) - {CommandCategory.UNKNOWN}
