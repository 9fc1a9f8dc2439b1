"""Exact inference for discrete Bayesian networks.

Provides :class:`VariableElimination`, which answers
``P(target | evidence)`` by building one :class:`~probnet.inference.factor.Factor`
per variable and summing out hidden variables as soon as they are
reached.

Elimination order
-----------------
Variables are visited in reverse network insertion order.  Insertion
order is assumed to be topological (parents first), so the reverse
visits leaves first.  Whenever a hidden variable (neither the target
nor in the evidence) is visited, every live factor is joined and the
variable is summed out, leaving a single live factor.
"""

from __future__ import annotations

import logging
from typing import List

from probnet.core.types import Condition, Event
from probnet.inference.base import Inference
from probnet.inference.factor import Factor, join_all
from probnet.networks.dag import BayesianNetwork

log = logging.getLogger(__name__)


class VariableElimination(Inference):
    """Exact inference by variable elimination.

    Parameters
    ----------
    network : BayesianNetwork
        The network to query.  It is only read, never modified.

    Examples
    --------
    >>> ve = VariableElimination(network)
    >>> ve.ask("Rain=T | Umbrella=T")
    '0.658537'
    """

    def __init__(self, network: BayesianNetwork) -> None:
        super().__init__(network)

    def posterior(self, target: Event, evidence: Condition) -> Factor:
        """Return the normalized factor over the target variable."""
        order = list(reversed(self.network.variables))

        factors: List[Factor] = []
        for v in order:
            factors.append(Factor.from_variable(v, evidence))

            if v.name != target.variable.name and not evidence.mentions(v):
                product = join_all(factors)
                factors = [product.eliminate(v)]
                log.debug(
                    "Eliminated %r; live factor over %s with %d rows",
                    v.name, factors[0].variable_names, len(factors[0]),
                )

        return join_all(factors).normalize()

    def probability(self, target: Event, evidence: Condition) -> float:
        result = self.posterior(target, evidence)
        return result[Condition([target])]

    def __repr__(self) -> str:
        return f"VariableElimination(nodes={self.network.nodes})"
