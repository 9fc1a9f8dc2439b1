"""Directed acyclic graph (DAG) based Bayesian network.

Provides :class:`BayesianNetwork`, the registry of :class:`Variable`
objects that both inference engines read from.  Nodes are kept in
insertion order, which callers guarantee is a topological order
(parents before children).  The edge structure is mirrored in a
:class:`networkx.DiGraph` for graph queries such as
:meth:`BayesianNetwork.markov_blanket`.

Nodes are added through a staged builder: :meth:`BayesianNetwork.try_add_node`
builds the variable as a draft that is only registered once every
value, parent and probability line has been validated, and returns a
:class:`BuildResult`.  :meth:`BayesianNetwork.add_node` is the raising
variant.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Set, Tuple

import networkx as nx

from probnet.core.errors import ValidationError
from probnet.core.types import Condition, Event, Variable, strip_whitespace

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Outcome of :meth:`BayesianNetwork.try_add_node`."""

    variable: Optional[Variable] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Variable:
        """Return the built variable, or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.variable


class BayesianNetwork:
    """Discrete Bayesian network built from textual node descriptions.

    Examples
    --------
    >>> bn = BayesianNetwork()
    >>> rain = bn.add_node("Rain", ["T", "F"], [], ["Rain=T : 0.3", "Rain=F : 0.7"])
    >>> umbrella = bn.add_node("Umbrella", ["T", "F"], ["Rain"], [
    ...     "Umbrella=T, Rain=T : 0.9", "Umbrella=F, Rain=T : 0.1",
    ...     "Umbrella=T, Rain=F : 0.2", "Umbrella=F, Rain=F : 0.8",
    ... ])
    >>> bn.query("Umbrella", "Umbrella=T, Rain=F")
    0.2
    """

    def __init__(self) -> None:
        # Insertion-ordered mapping: name -> Variable
        self._nodes: OrderedDict[str, Variable] = OrderedDict()
        self._graph: nx.DiGraph = nx.DiGraph()

    # ------------------------------------------------------------------ #
    #  Graph construction
    # ------------------------------------------------------------------ #

    def try_add_node(
        self,
        name: str,
        values: Sequence[str],
        parents: Sequence[str] = (),
        probabilities: Sequence[str] = (),
    ) -> BuildResult:
        """Validate and register a node, reporting failure as a result.

        Parameters
        ----------
        name : str
            Unique identifier for this variable.
        values : sequence of str
            Domain labels, e.g. ``["T", "F"]`` or
            ``["rainy", "sunny", "overcast"]``.
        parents : sequence of str
            Names of parent nodes.  Must already exist in the network.
        probabilities : sequence of str
            CPT lines such as ``"a = T, weather = sunny : 0.8"``, each
            mentioning exactly this variable and all of its parents.

        Returns
        -------
        BuildResult
            Holds the registered :class:`Variable` on success, or the
            :class:`ValidationError` on failure.  On failure the network
            is left exactly as it was.
        """
        try:
            draft = self._build_draft(name, values, parents, probabilities)
        except ValidationError as exc:
            log.debug("Rejected node %r: %s", name, exc)
            return BuildResult(error=exc)

        self._commit(draft)
        return BuildResult(variable=draft)

    def add_node(
        self,
        name: str,
        values: Sequence[str],
        parents: Sequence[str] = (),
        probabilities: Sequence[str] = (),
    ) -> Variable:
        """Add a node to the network, raising on invalid input.

        See :meth:`try_add_node` for the parameters.

        Raises
        ------
        ValidationError
            If the name is taken, a value is invalid or duplicated, a
            parent is missing, or a probability line is malformed.
        """
        return self.try_add_node(name, values, parents, probabilities).unwrap()

    def _build_draft(
        self,
        name: str,
        values: Sequence[str],
        parents: Sequence[str],
        probabilities: Sequence[str],
    ) -> Variable:
        if name in self._nodes:
            raise ValidationError(f"Node '{name}' already exists")

        var = Variable(name, network=self)
        for v in values:
            var.add_value(v)
        for p in parents:
            var.add_parent(p)
        for line in probabilities:
            var.add_probability(line)
        return var

    def _commit(self, var: Variable) -> None:
        self._nodes[var.name] = var
        self._graph.add_node(var.name)
        for parent in var.parents:
            parent.children.append(var)
            self._graph.add_edge(parent.name, var.name)
        log.debug(
            "Registered node %r with parents %s",
            var.name, [p.name for p in var.parents],
        )

    # ------------------------------------------------------------------ #
    #  Lookup
    # ------------------------------------------------------------------ #

    def has_node(self, name: str) -> bool:
        return name in self._nodes

    def get_node(self, name: str) -> Variable:
        """Return the variable called *name*."""
        try:
            return self._nodes[name]
        except KeyError:
            raise ValidationError(f"No such variable <{name}>.") from None

    @property
    def nodes(self) -> List[str]:
        """Return node names in topological (insertion) order."""
        return list(self._nodes.keys())

    @property
    def variables(self) -> List[Variable]:
        """Return variables in topological (insertion) order."""
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Tuple[str, str]]:
        """Return directed edges as (parent, child) tuples."""
        return list(self._graph.edges())

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    # ------------------------------------------------------------------ #
    #  Parsing
    # ------------------------------------------------------------------ #

    def parse_event(self, text: str) -> Event:
        """Convert ``"a = true"`` into an :class:`Event`."""
        text = strip_whitespace(text)
        name = text.split("=")[0]
        return self.get_node(name).parse_event(text)

    def parse_condition(self, text: str) -> Condition:
        """Convert ``"a = true, weather = sunny"`` into a :class:`Condition`.

        Empty clauses are skipped, so ``""`` yields the empty condition.
        """
        events = [
            self.parse_event(piece)
            for piece in strip_whitespace(text).split(",")
            if piece
        ]
        return Condition(events)

    def query(self, name: str, condition: str) -> float:
        """Return the stored CPT entry of *name* for *condition*."""
        return self.get_node(name).probability(condition)

    # ------------------------------------------------------------------ #
    #  Graph queries
    # ------------------------------------------------------------------ #

    def markov_blanket(self, name: str) -> Set[str]:
        """Return the parents, children and children's other parents of *name*."""
        if name not in self._nodes:
            raise ValidationError(f"No such variable <{name}>.")
        blanket: Set[str] = set(self._graph.predecessors(name))
        for child in self._graph.successors(name):
            blanket.add(child)
            blanket.update(self._graph.predecessors(child))
        blanket.discard(name)
        return blanket

    def is_dag(self) -> bool:
        return nx.is_directed_acyclic_graph(self._graph)

    def __repr__(self) -> str:
        return f"BayesianNetwork(nodes={self.nodes}, edges={self.edges})"
