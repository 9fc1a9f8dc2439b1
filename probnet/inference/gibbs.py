"""Approximate inference by Gibbs sampling.

Provides:
- SelectionStrategy: picks which non-evidence variable to resample next
- RandomSelection / RoundRobinSelection: the two available policies
- GibbsSampler: Markov chain Monte Carlo engine answering queries by
  the fraction of iterations in which the target holds

Each resampling step draws a new value for one variable ``Xi`` from
its Markov blanket distribution::

    P(xi | mb(Xi)) = alpha * P(xi | parents(Xi))
                           * PRODUCT_j P(zj | parents(Zj))

where ``Zj`` ranges over the children of ``Xi``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

import numpy as np

from probnet.core.types import Condition, Event, Value, Variable
from probnet.inference.base import Inference
from probnet.networks.dag import BayesianNetwork

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Variable selection strategies
# ---------------------------------------------------------------------------

class SelectionStrategy(ABC):
    """Chooses the variable to resample at each iteration."""

    @abstractmethod
    def select(
        self, candidates: List[str], iteration: int, rng: np.random.Generator,
    ) -> str:
        """Return one of *candidates* to resample at *iteration*."""
        pass


class RandomSelection(SelectionStrategy):
    """Reshuffle the candidates every iteration and take the first one."""

    def select(
        self, candidates: List[str], iteration: int, rng: np.random.Generator,
    ) -> str:
        rng.shuffle(candidates)
        return candidates[0]


class RoundRobinSelection(SelectionStrategy):
    """Cycle through the candidates in order."""

    def select(
        self, candidates: List[str], iteration: int, rng: np.random.Generator,
    ) -> str:
        return candidates[iteration % len(candidates)]


_STRATEGIES = {
    "random": RandomSelection,
    "round_robin": RoundRobinSelection,
}


def _make_strategy(selection: Union[str, SelectionStrategy]) -> SelectionStrategy:
    if isinstance(selection, SelectionStrategy):
        return selection
    cls = _STRATEGIES.get(selection)
    if cls is None:
        raise ValueError(
            f"Unknown selection strategy '{selection}'. "
            f"Supported: {list(_STRATEGIES.keys())}"
        )
    return cls()


# ---------------------------------------------------------------------------
# Sampler
# ---------------------------------------------------------------------------

class GibbsSampler(Inference):
    """Gibbs sampling over a discrete Bayesian network.

    Args:
        network: The network to query.  It is only read.
        n_samples: Number of resampling iterations per query.
        selection: ``"random"`` (default), ``"round_robin"`` or a
            :class:`SelectionStrategy` instance.
        seed: Seed for the random source built when *rng* is not given.
        rng: An explicit :class:`numpy.random.Generator` to draw from.
    """

    def __init__(
        self,
        network: BayesianNetwork,
        n_samples: int,
        selection: Union[str, SelectionStrategy] = "random",
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        super().__init__(network)
        if n_samples <= 0:
            raise ValueError(f"n_samples must be positive, got {n_samples}")
        self.n_samples = n_samples
        self.selection = _make_strategy(selection)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    # ------------------------------------------------------------------ #
    #  Conditional probabilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def _given_parents(variable: Variable, state: Dict[str, Value]) -> float:
        """P(variable = state[variable] | parents = state[parents])."""
        cond = Condition(Event(v, state[v.name]) for v in variable.family)
        return variable.probability(cond)

    def _weights(self, variable: Variable, state: Dict[str, Value]) -> np.ndarray:
        """Unnormalized Markov blanket weights over *variable*'s domain.

        *state* is modified while scoring and restored before returning.
        """
        current = state[variable.name]
        weights = np.empty(len(variable.domain))
        for i, value in enumerate(variable.values):
            state[variable.name] = value
            p = self._given_parents(variable, state)
            for child in variable.children:
                p *= self._given_parents(child, state)
            weights[i] = p
        state[variable.name] = current
        return weights

    def sample_value(self, variable: Variable, state: Dict[str, Value]) -> Value:
        """Draw a new value for *variable* given the rest of *state*."""
        weights = self._weights(variable, state)
        total = weights.sum()
        if total > 0:
            percent = 100.0 * weights / total
        else:
            # every value is impossible under the current state
            percent = np.full(len(weights), 100.0 / len(weights))

        # lottery
        draw = self.rng.integers(100) + self.rng.random()
        cumulative = 0.0
        values = variable.values
        for value, share in zip(values, percent):
            cumulative += share
            if cumulative >= draw:
                return value
        return values[-1]

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    def _stored_probability(
        self, target: Event, evidence: Condition,
    ) -> Optional[float]:
        """Return the CPT entry answering the query directly, if there is one."""
        variable = target.variable
        full = Condition(list(evidence) + [target])
        if variable.cpt is not None and full in variable.cpt:
            return variable.cpt[full]
        return None

    def _initial_state(self, evidence: Condition) -> Dict[str, Value]:
        state: Dict[str, Value] = {}
        for v in self.network.variables:
            event = evidence.get(v)
            if event is not None:
                state[v.name] = event.value
            else:
                values = v.values
                state[v.name] = values[self.rng.integers(len(values))]
        return state

    def probability(self, target: Event, evidence: Condition) -> float:
        stored = self._stored_probability(target, evidence)
        if stored is not None:
            log.debug("Answered %s | %s from the stored table", target, evidence)
            return stored

        state = self._initial_state(evidence)
        candidates = [
            name for name in self.network.nodes
            if evidence.get(self.network.get_node(name)) is None
        ]

        target_name = target.variable.name
        hits = 0
        for i in range(self.n_samples):
            var = self.network.get_node(
                self.selection.select(candidates, i, self.rng)
            )
            state[var.name] = self.sample_value(var, state)
            if state[target_name] == target.value:
                hits += 1

        log.debug(
            "Sampled %s | %s: %d hits in %d iterations",
            target, evidence, hits, self.n_samples,
        )
        return hits / self.n_samples

    def __repr__(self) -> str:
        return (
            f"GibbsSampler(n_samples={self.n_samples}, "
            f"selection={type(self.selection).__name__})"
        )
