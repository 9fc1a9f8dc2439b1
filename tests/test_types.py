"""Tests for probnet/core/types.py.

Covers:
- Value and Variable domain construction
- Event validation, equality and ordering
- Condition order independence, membership and projection
- all_conditions cartesian products
- CPT line installation
"""

from __future__ import annotations

import itertools

import pytest

from probnet.core.errors import ValidationError
from probnet.core.types import (
    Condition,
    Event,
    Variable,
    all_conditions,
    strip_whitespace,
)


# ------------------------------------------------------------------ #
#  Helpers
# ------------------------------------------------------------------ #

def _variable(name: str, values=("T", "F")) -> Variable:
    var = Variable(name)
    for v in values:
        var.add_value(v)
    return var


# ------------------------------------------------------------------ #
#  Value / Variable domain
# ------------------------------------------------------------------ #

class TestDomain:
    """Tests for building a variable's domain."""

    def test_values_keep_insertion_order(self):
        var = _variable("W", ["sunny", "rainy", "overcast"])
        assert [v.name for v in var.values] == ["sunny", "rainy", "overcast"]

    def test_value_owned_by_variable(self):
        var = _variable("A")
        assert var.get_value("T").variable is var

    def test_same_label_on_different_variables_is_distinct(self):
        a = _variable("A")
        b = _variable("B")
        assert a.get_value("T") != b.get_value("T")
        assert len({a.get_value("T"), b.get_value("T")}) == 2
        assert a.get_value("T") == a.get_value("T")
        assert a.get_value("F") < a.get_value("T")

    def test_duplicate_value_raises(self):
        var = _variable("A")
        with pytest.raises(ValidationError, match="already exists"):
            var.add_value("T")

    def test_none_value_raises(self):
        var = Variable("A")
        with pytest.raises(ValidationError, match="Invalid value name"):
            var.add_value(None)

    def test_unknown_value_raises(self):
        var = _variable("A")
        with pytest.raises(ValidationError, match="does not contain"):
            var.get_value("maybe")

    def test_empty_variable_name_raises(self):
        with pytest.raises(ValidationError):
            Variable("")

    def test_family_lists_parents_then_self(self):
        a = _variable("A")
        b = _variable("B")
        c = _variable("C")
        c.add_parent(a)
        c.add_parent(b)
        assert [v.name for v in c.family] == ["A", "B", "C"]

    def test_duplicate_parent_raises(self):
        a = _variable("A")
        b = _variable("B")
        b.add_parent(a)
        with pytest.raises(ValidationError, match="listed twice"):
            b.add_parent(a)

    def test_parent_by_name_without_network_raises(self):
        b = _variable("B")
        with pytest.raises(ValidationError, match="does not exist"):
            b.add_parent("A")


# ------------------------------------------------------------------ #
#  Event
# ------------------------------------------------------------------ #

class TestEvent:
    """Tests for Event."""

    def test_of_resolves_value(self):
        var = _variable("A")
        e = Event.of(var, "T")
        assert e.variable is var
        assert e.value is var.get_value("T")

    def test_foreign_value_rejected(self):
        a = _variable("A")
        b = _variable("B")
        with pytest.raises(ValidationError, match="does not contain"):
            Event(a, b.get_value("T"))

    def test_equality_and_hash(self):
        var = _variable("A")
        assert Event.of(var, "T") == Event.of(var, "T")
        assert hash(Event.of(var, "T")) == hash(Event.of(var, "T"))
        assert Event.of(var, "T") != Event.of(var, "F")

    def test_ordering_by_variable_name_first(self):
        a = _variable("A")
        b = _variable("B")
        assert Event.of(a, "T") < Event.of(b, "F")
        assert sorted([Event.of(b, "T"), Event.of(a, "T")])[0].variable is a

    def test_str(self):
        var = _variable("Rain")
        assert str(Event.of(var, "T")) == "Rain = T"


# ------------------------------------------------------------------ #
#  Condition
# ------------------------------------------------------------------ #

class TestCondition:
    """Tests for Condition."""

    def test_order_independent(self):
        """Every permutation of the same events gives an equal condition."""
        vars_ = [_variable(n) for n in ("C", "A", "B")]
        events = [Event.of(v, "T") for v in vars_]
        conds = [Condition(p) for p in itertools.permutations(events)]
        assert all(c == conds[0] for c in conds)
        assert len({hash(c) for c in conds}) == 1

    def test_events_sorted(self):
        b = _variable("B")
        a = _variable("A")
        cond = Condition([Event.of(b, "T"), Event.of(a, "F")])
        assert [e.variable.name for e in cond] == ["A", "B"]

    def test_usable_as_dict_key(self):
        a = _variable("A")
        b = _variable("B")
        table = {Condition([Event.of(a, "T"), Event.of(b, "F")]): 0.25}
        assert table[Condition([Event.of(b, "F"), Event.of(a, "T")])] == 0.25

    def test_repeated_event_collapses(self):
        a = _variable("A")
        cond = Condition([Event.of(a, "T"), Event.of(a, "T")])
        assert len(cond) == 1

    def test_conflicting_events_raise(self):
        a = _variable("A")
        with pytest.raises(ValidationError, match="Conflicting"):
            Condition([Event.of(a, "T"), Event.of(a, "F")])

    def test_contains_event(self):
        a = _variable("A")
        cond = Condition([Event.of(a, "T")])
        assert Event.of(a, "T") in cond
        assert Event.of(a, "F") not in cond

    def test_issuperset(self):
        a = _variable("A")
        b = _variable("B")
        big = Condition([Event.of(a, "T"), Event.of(b, "F")])
        small = Condition([Event.of(b, "F")])
        assert big.issuperset(small)
        assert not small.issuperset(big)
        assert big.issuperset(Condition())

    def test_mentions(self):
        a = _variable("A")
        b = _variable("B")
        cond = Condition([Event.of(a, "T")])
        assert cond.mentions(a)
        assert not cond.mentions(b)

    def test_project_and_without(self):
        a = _variable("A")
        b = _variable("B")
        cond = Condition([Event.of(a, "T"), Event.of(b, "F")])
        assert cond.project(["B"]) == Condition([Event.of(b, "F")])
        assert cond.without(b) == Condition([Event.of(a, "T")])

    def test_get(self):
        a = _variable("A")
        b = _variable("B")
        cond = Condition([Event.of(a, "T")])
        assert cond.get(a) == Event.of(a, "T")
        assert cond.get(b) is None

    def test_str(self):
        a = _variable("A")
        b = _variable("B")
        cond = Condition([Event.of(b, "F"), Event.of(a, "T")])
        assert str(cond) == "[A = T, B = F]"
        assert str(Condition()) == "[]"


# ------------------------------------------------------------------ #
#  all_conditions
# ------------------------------------------------------------------ #

class TestAllConditions:
    """Tests for the cartesian product generator."""

    def test_size_is_product_of_domains(self):
        a = _variable("A", ["x", "y", "z"])
        b = _variable("B")
        conds = list(all_conditions([a, b]))
        assert len(conds) == 6
        assert len(set(conds)) == 6

    def test_empty_yields_single_empty_condition(self):
        assert list(all_conditions([])) == [Condition()]

    def test_is_lazy(self):
        vars_ = [_variable(f"V{i}") for i in range(40)]
        first = next(all_conditions(vars_))
        assert len(first) == 40


# ------------------------------------------------------------------ #
#  CPT installation
# ------------------------------------------------------------------ #

class TestProbabilityLines:
    """Tests for Variable.add_probability on a standalone variable."""

    def test_root_prior(self):
        a = _variable("A")
        a.add_probability("A = T : 0.3")
        a.add_probability("A=F:0.7")
        assert a.probability("A=T") == 0.3
        assert a.probability("A=F") == 0.7

    def test_table_prefilled_on_first_line(self):
        a = _variable("A", ["x", "y", "z"])
        a.add_probability("A=x : 0.5")
        assert len(a.cpt) == 3
        assert a.probability("A=y") == 0.0

    def test_two_separators_raise(self):
        a = _variable("A")
        with pytest.raises(ValidationError, match="Only one ':'"):
            a.add_probability("A=T : 0.3 : 0.2")

    def test_arity_mismatch_raises(self):
        a = _variable("A")
        with pytest.raises(ValidationError, match="mismatches"):
            a.add_probability("A=T, A=F : 0.3")

    def test_bad_number_raises(self):
        a = _variable("A")
        with pytest.raises(ValidationError, match="Invalid probability"):
            a.add_probability("A=T : lots")

    def test_out_of_range_raises(self):
        a = _variable("A")
        with pytest.raises(ValidationError, match="must be in"):
            a.add_probability("A=T : 1.5")

    def test_unknown_variable_in_line_raises(self):
        a = _variable("A")
        with pytest.raises(ValidationError, match="No such variable"):
            a.add_probability("Z=T : 0.5")

    def test_probability_without_table_raises(self):
        a = _variable("A")
        with pytest.raises(ValidationError, match="no conditional"):
            a.probability("A=T")


def test_strip_whitespace():
    assert strip_whitespace(" a = T ,\tb=F \n") == "a=T,b=F"
