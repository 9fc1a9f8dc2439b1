"""ProbNet benchmark suite using pytest-benchmark.

Run:
    pytest probnet/benchmarks/suite.py --benchmark-only --benchmark-autosave
"""

from __future__ import annotations

import pytest

from probnet.inference.exact import VariableElimination
from probnet.inference.gibbs import GibbsSampler
from probnet.networks.graph import build_metastatic_cancer_network, build_tree


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def cancer():
    """Five-node metastatic cancer network."""
    return build_metastatic_cancer_network()


@pytest.fixture
def tree_10():
    """10-node tree-structured Bayesian network."""
    return build_tree(num_nodes=10, num_states=2, seed=42)


# ---------------------------------------------------------------------------
# Benchmark: Variable Elimination Speed
# ---------------------------------------------------------------------------

def test_variable_elimination_speed(benchmark, cancer):
    """VE on the cancer network must answer in <10ms."""
    ve = VariableElimination(cancer)

    result = benchmark(ve.ask, "M=T | S=T, C=F")

    assert 0.0 <= float(result) <= 1.0
    median_ms = benchmark.stats.stats.median * 1000
    assert median_ms < 10.0, (
        f"Variable elimination took {median_ms:.3f}ms (limit: 10ms)"
    )


def test_variable_elimination_tree(benchmark, tree_10):
    """VE on a 10-node tree with evidence on a leaf."""
    ve = VariableElimination(tree_10)

    result = benchmark(ve.ask, "X0=s0 | X9=s1")

    assert 0.0 <= float(result) <= 1.0


# ---------------------------------------------------------------------------
# Benchmark: Gibbs Sampling Throughput
# ---------------------------------------------------------------------------

def test_gibbs_throughput(benchmark, cancer):
    """10K Gibbs iterations must complete in <2s."""
    sampler = GibbsSampler(cancer, 10_000, seed=42)

    result = benchmark(sampler.ask, "M=T | S=T, C=F")

    assert 0.0 <= float(result) <= 1.0
    median_ms = benchmark.stats.stats.median * 1000
    assert median_ms < 2000.0, (
        f"Gibbs sampling took {median_ms:.3f}ms (limit: 2000ms)"
    )
