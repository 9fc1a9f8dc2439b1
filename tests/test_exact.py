"""Tests for probnet/inference/exact.py.

Covers:
- Rain/Umbrella end-to-end answers
- Variable elimination vs brute-force enumeration on random chains,
  trees and the metastatic cancer network
- Determinism of repeated queries
- Query errors
"""

from __future__ import annotations

import itertools
from typing import Dict

import pytest

from probnet.core.errors import QueryError
from probnet.core.types import Condition, Event, Value
from probnet.inference.exact import VariableElimination
from probnet.networks.dag import BayesianNetwork
from probnet.networks.graph import (
    build_chain,
    build_metastatic_cancer_network,
    build_tree,
)


# ------------------------------------------------------------------ #
#  Helpers
# ------------------------------------------------------------------ #

def _build_rain() -> BayesianNetwork:
    bn = BayesianNetwork()
    bn.add_node("Rain", ["T", "F"], [], ["Rain=T : 0.3", "Rain=F : 0.7"])
    bn.add_node("Umbrella", ["T", "F"], ["Rain"], [
        "Umbrella=T, Rain=T : 0.9",
        "Umbrella=F, Rain=T : 0.1",
        "Umbrella=T, Rain=F : 0.2",
        "Umbrella=F, Rain=F : 0.8",
    ])
    return bn


def _brute_force(bn: BayesianNetwork, target: str, evidence: str) -> float:
    """Compute P(target | evidence) by enumerating all joint configurations."""
    target_event = bn.parse_event(target)
    observed = bn.parse_condition(evidence)
    variables = bn.variables

    numerator = 0.0
    denominator = 0.0
    for values in itertools.product(*(v.values for v in variables)):
        assignment: Dict[str, Value] = {
            v.name: x for v, x in zip(variables, values)
        }
        if any(assignment[e.variable.name] != e.value for e in observed):
            continue

        # P(X1=x1, ..., Xn=xn)
        prob = 1.0
        for v in variables:
            row = Condition(Event(p, assignment[p.name]) for p in v.family)
            prob *= v.cpt[row]

        denominator += prob
        if assignment[target_event.variable.name] == target_event.value:
            numerator += prob
    return numerator / denominator


# ------------------------------------------------------------------ #
#  End-to-end
# ------------------------------------------------------------------ #

class TestRainUmbrella:
    """Known answers on the two-node network."""

    def test_marginal(self):
        assert VariableElimination(_build_rain()).ask("Umbrella=T|") == "0.410000"

    def test_marginal_without_pipe(self):
        assert VariableElimination(_build_rain()).ask("Umbrella=T") == "0.410000"

    def test_posterior(self):
        ve = VariableElimination(_build_rain())
        assert ve.ask("Rain=T|Umbrella=T") == "0.658537"

    def test_posterior_whitespace(self):
        ve = VariableElimination(_build_rain())
        assert ve.ask("  Rain = T |  Umbrella = T ") == "0.658537"

    def test_root_prior(self):
        assert VariableElimination(_build_rain()).ask("Rain=F|") == "0.700000"

    def test_probability_float(self):
        bn = _build_rain()
        ve = VariableElimination(bn)
        p = ve.probability(bn.parse_event("Rain=T"), bn.parse_condition("Umbrella=T"))
        assert p == pytest.approx(0.27 / 0.41)

    def test_posterior_sums_to_one(self):
        bn = _build_rain()
        ve = VariableElimination(bn)
        result = ve.posterior(bn.parse_event("Rain=T"), bn.parse_condition("Umbrella=F"))
        assert result.variable_names == ["Rain"]
        assert abs(result.total() - 1.0) < 1e-9


class TestDeterminism:
    """VE involves no randomness."""

    def test_repeated_calls_identical(self):
        ve = VariableElimination(build_metastatic_cancer_network())
        answers = {ve.ask("M=T | S=T, C=F") for _ in range(5)}
        assert len(answers) == 1

    def test_separate_engines_identical(self):
        net = build_metastatic_cancer_network()
        a = VariableElimination(net).ask("B=T | C=T")
        b = VariableElimination(net).ask("B=T | C=T")
        assert a == b

    def test_network_unchanged(self):
        net = build_metastatic_cancer_network()
        before = {name: dict(net.get_node(name).cpt) for name in net}
        VariableElimination(net).ask("M=T | S=T, C=F")
        assert {name: net.get_node(name).cpt for name in net} == before


# ------------------------------------------------------------------ #
#  Against brute-force enumeration
# ------------------------------------------------------------------ #

class TestAgainstEnumeration:
    """VE must agree with exhaustive enumeration."""

    @pytest.mark.parametrize(
        "target, evidence",
        [
            ("M=T", ""),
            ("C=T", ""),
            ("M=T", "S=T, C=F"),
            ("B=F", "C=T"),
            ("I=T", "S=F"),
            ("S=T", "M=F, I=T"),
        ],
    )
    def test_cancer_network(self, target, evidence):
        net = build_metastatic_cancer_network()
        ve = VariableElimination(net)
        expected = _brute_force(net, target, evidence)
        query = f"{target} | {evidence}"
        assert float(ve.ask(query)) == pytest.approx(expected, abs=5e-7)

    def test_chain(self):
        net = build_chain(num_nodes=6, num_states=3, seed=7)
        ve = VariableElimination(net)
        for target, evidence in [("X5=s2", ""), ("X0=s1", "X5=s0"),
                                 ("X3=s0", "X1=s2, X5=s1")]:
            expected = _brute_force(net, target, evidence)
            got = ve.probability(
                net.parse_event(target), net.parse_condition(evidence),
            )
            assert got == pytest.approx(expected, abs=1e-9)

    def test_tree(self):
        net = build_tree(num_nodes=7, num_states=2, seed=3)
        ve = VariableElimination(net)
        for target, evidence in [("X0=s0", "X6=s1"), ("X3=s1", "X4=s0, X2=s1")]:
            expected = _brute_force(net, target, evidence)
            got = ve.probability(
                net.parse_event(target), net.parse_condition(evidence),
            )
            assert got == pytest.approx(expected, abs=1e-9)

    def test_distribution_sums_to_one(self):
        net = build_metastatic_cancer_network()
        ve = VariableElimination(net)
        total = sum(float(ve.ask(f"C={v} | S=T")) for v in ("T", "F"))
        assert total == pytest.approx(1.0, abs=2e-6)


# ------------------------------------------------------------------ #
#  Errors
# ------------------------------------------------------------------ #

class TestQueryErrors:
    """Query errors propagate to the caller."""

    def test_unknown_variable(self):
        ve = VariableElimination(_build_rain())
        with pytest.raises(QueryError, match="No such variable"):
            ve.ask("Snow=T|")

    def test_unknown_value(self):
        ve = VariableElimination(_build_rain())
        with pytest.raises(QueryError, match="does not contain"):
            ve.ask("Rain=T|Umbrella=maybe")

    def test_target_in_evidence(self):
        ve = VariableElimination(_build_rain())
        with pytest.raises(QueryError, match="also appears"):
            ve.ask("Rain=T|Rain=T")

    def test_engine_usable_after_error(self):
        ve = VariableElimination(_build_rain())
        with pytest.raises(QueryError):
            ve.ask("Rain")
        assert ve.ask("Umbrella=T|") == "0.410000"
