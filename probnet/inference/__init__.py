"""Inference algorithms for ProbNet."""

from typing import Optional

from probnet.inference.base import Inference, format_probability
from probnet.inference.exact import VariableElimination
from probnet.inference.factor import Factor
from probnet.inference.gibbs import (
    GibbsSampler,
    RandomSelection,
    RoundRobinSelection,
    SelectionStrategy,
)
from probnet.inference.query import convert_shorthand, parse_query
from probnet.networks.dag import BayesianNetwork


def make_engine(
    network: BayesianNetwork,
    method: str,
    n_samples: int = 0,
    seed: Optional[int] = None,
) -> Inference:
    """Return the engine named *method*: ``"VE"`` or ``"MCMC"``.

    Raises:
        ValueError: If *method* is not recognised, or ``"MCMC"`` is
            requested with a non-positive *n_samples*.
    """
    if method == "VE":
        return VariableElimination(network)
    if method == "MCMC":
        return GibbsSampler(network, n_samples, seed=seed)
    raise ValueError(f"Unknown inference method '{method}'. Use 'VE' or 'MCMC'.")


__all__ = [
    "Factor",
    "GibbsSampler",
    "Inference",
    "RandomSelection",
    "RoundRobinSelection",
    "SelectionStrategy",
    "VariableElimination",
    "convert_shorthand",
    "format_probability",
    "make_engine",
    "parse_query",
]
