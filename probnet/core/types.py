"""Core types for ProbNet discrete Bayesian networks."""

from __future__ import annotations

import functools
import itertools
import re
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from probnet.core.errors import ValidationError

if TYPE_CHECKING:
    from probnet.networks.dag import BayesianNetwork

_WHITESPACE = re.compile(r"\s+")


def strip_whitespace(text: str) -> str:
    """Remove every whitespace character from *text*."""
    return _WHITESPACE.sub("", text)


# ---------------------------------------------------------------------------
# Values and events
# ---------------------------------------------------------------------------

@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Value:
    """One outcome label in the domain of a single :class:`Variable`.

    Values compare and hash by ``(variable name, value name)``, so equal
    labels owned by different variables stay distinct.
    """

    name: str
    variable: "Variable" = field(repr=False)

    def __post_init__(self) -> None:
        if not self.name or self.variable is None:
            raise ValidationError(
                f"Invalid Value content with name: {self.name!r} "
                f"and variable: {self.variable!r}"
            )

    @property
    def key(self) -> Tuple[str, str]:
        return (self.variable.name, self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: "Value") -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.name


@functools.total_ordering
@dataclass(frozen=True, eq=False, repr=False)
class Event:
    """The assignment ``variable = value``.

    Events are compared and hashed by ``(variable name, value name)``
    so they can be used inside table keys without relying on object
    identity.
    """

    variable: "Variable"
    value: Value

    def __post_init__(self) -> None:
        if self.variable.domain.get(self.value.name) is not self.value:
            raise ValidationError(
                f"Variable <{self.variable.name}> does not contain the "
                f"value \"{self.value.name}\"."
            )

    @classmethod
    def of(cls, variable: "Variable", outcome: str) -> "Event":
        """Build an event from a variable and the *name* of one of its values."""
        return cls(variable, variable.get_value(outcome))

    @property
    def key(self) -> Tuple[str, str]:
        return (self.variable.name, self.value.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: "Event") -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.variable.name} = {self.value.name}"

    def __repr__(self) -> str:
        return f"Event({self.variable.name}={self.value.name})"


# ---------------------------------------------------------------------------
# Condition
# ---------------------------------------------------------------------------

class Condition:
    """An immutable, sorted set of events with at most one event per variable.

    Two conditions built from the same events compare equal and hash
    equal whatever order the events were given in, which makes them
    usable as keys of probability tables.

    Parameters
    ----------
    events : iterable of Event
        Assignments making up the condition.  Repeating an identical
        event is harmless; two different values for the same variable
        raise :class:`ValidationError`.
    """

    __slots__ = ("_events", "_key")

    def __init__(self, events: Iterable[Event] = ()) -> None:
        by_variable: Dict[str, Event] = {}
        for event in events:
            seen = by_variable.get(event.variable.name)
            if seen is not None and seen != event:
                raise ValidationError(
                    f"Conflicting events <{seen}> and <{event}> in one "
                    f"condition."
                )
            by_variable[event.variable.name] = event
        self._set(tuple(sorted(by_variable.values())))

    @classmethod
    def _from_sorted(cls, events: Tuple[Event, ...]) -> "Condition":
        cond = cls.__new__(cls)
        cond._set(events)
        return cond

    def _set(self, events: Tuple[Event, ...]) -> None:
        self._events = events
        self._key = tuple(e.key for e in events)

    # ----- container protocol ---------------------------------------------

    @property
    def events(self) -> Tuple[Event, ...]:
        return self._events

    @property
    def variable_names(self) -> FrozenSet[str]:
        return frozenset(e.variable.name for e in self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event: object) -> bool:
        return event in self._events

    # ----- set-like queries -----------------------------------------------

    def issuperset(self, other: "Condition") -> bool:
        """Return True if every event of *other* is also in this condition."""
        return all(e in self._events for e in other)

    def mentions(self, variable: "Variable") -> bool:
        """Return True if some event in this condition is about *variable*."""
        return any(e.variable.name == variable.name for e in self._events)

    def get(self, variable: "Variable") -> Optional[Event]:
        """Return the event assigning *variable*, or None."""
        for e in self._events:
            if e.variable.name == variable.name:
                return e
        return None

    def project(self, names: Iterable[str]) -> "Condition":
        """Restrict this condition to the events on the given variable names."""
        keep = set(names)
        return Condition._from_sorted(
            tuple(e for e in self._events if e.variable.name in keep)
        )

    def without(self, variable: "Variable") -> "Condition":
        """Return this condition with any event on *variable* removed."""
        return Condition._from_sorted(
            tuple(e for e in self._events if e.variable.name != variable.name)
        )

    # ----- value semantics ------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Condition):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self._events) + "]"

    def __repr__(self) -> str:
        inner = ", ".join(f"{v}={x}" for v, x in self._key)
        return f"Condition({inner})"


def all_conditions(variables: Sequence["Variable"]) -> Iterator[Condition]:
    """Yield one :class:`Condition` per joint assignment of *variables*.

    Assignments are produced lazily in odometer order (the last
    variable changes fastest), each domain walked in insertion order.
    An empty sequence yields a single empty condition.
    """
    domains = [
        [Event(v, value) for value in v.domain.values()] for v in variables
    ]
    for combination in itertools.product(*domains):
        yield Condition(combination)


# ---------------------------------------------------------------------------
# Variable
# ---------------------------------------------------------------------------

class Variable:
    """A named discrete random variable in a Bayesian network.

    A variable owns its domain of :class:`Value` objects, knows its
    parents and children, and stores its conditional probability table
    (CPT) as a mapping from a full ``parents + self`` :class:`Condition`
    to a probability.  The CPT is created on the first call to
    :meth:`add_probability` with every combination present (initially
    ``0.0``) and then filled in line by line.

    Parameters
    ----------
    name : str
        Identifier, unique within its network.
    network : BayesianNetwork, optional
        Network used to resolve other variables by name while parsing.
    """

    def __init__(
        self,
        name: str,
        network: Optional["BayesianNetwork"] = None,
    ) -> None:
        if not name:
            raise ValidationError(f"Invalid variable name {name!r}.")
        self.name = name
        self.network = network
        self.domain: Dict[str, Value] = {}
        self.parents: List[Variable] = []
        self.children: List[Variable] = []
        self.cpt: Optional[Dict[Condition, float]] = None

    # ----- accessors ------------------------------------------------------

    @property
    def values(self) -> Tuple[Value, ...]:
        """Domain values in insertion order."""
        return tuple(self.domain.values())

    @property
    def family(self) -> List["Variable"]:
        """The parents followed by the variable itself."""
        return list(self.parents) + [self]

    def get_value(self, name: str) -> Value:
        try:
            return self.domain[name]
        except KeyError:
            raise ValidationError(
                f"Variable <{self.name}> does not contain the value "
                f"\"{name}\"."
            ) from None

    # ----- builder methods ------------------------------------------------

    def add_value(self, name: Optional[str]) -> Value:
        """Append a new value named *name* to the domain."""
        if not name:
            raise ValidationError(f"Invalid value name {name!r}.")
        if name in self.domain:
            raise ValidationError(f"Value with name \"{name}\" already exists.")
        value = Value(name, self)
        self.domain[name] = value
        return value

    def add_parent(self, parent: Union[str, "Variable"]) -> None:
        """Append *parent* (a variable or the name of one) to the parents."""
        if isinstance(parent, str):
            name = parent
            if name == self.name or self.network is None \
                    or not self.network.has_node(name):
                raise ValidationError(
                    f"The specified parent node \"{name}\" does not "
                    f"exist (yet)."
                )
            parent = self.network.get_node(name)
        if parent is None:
            raise ValidationError(
                "The specified parent node does not exist (yet)."
            )
        if any(p.name == parent.name for p in self.parents):
            raise ValidationError(
                f"Parent \"{parent.name}\" listed twice for <{self.name}>."
            )
        self.parents.append(parent)

    def add_probability(self, line: str) -> None:
        """Install one CPT entry from a line like ``"a=T, w=sunny : 0.8"``."""
        text = strip_whitespace(line)
        desc = text.split(":")
        if len(desc) != 2:
            raise ValidationError(
                f"Only one ':' in a probability description allowed, "
                f"received \"{line}\"."
            )
        try:
            probability = float(desc[1])
        except ValueError:
            raise ValidationError(
                f"Invalid probability \"{desc[1]}\" in \"{line}\"."
            ) from None
        if not 0.0 <= probability <= 1.0:
            raise ValidationError(
                f"Probability must be in [0, 1], got {probability} in "
                f"\"{line}\"."
            )

        condition = self.parse_condition(desc[0])

        if self.cpt is None:
            self.cpt = {c: 0.0 for c in all_conditions(self.family)}
        if condition not in self.cpt:
            raise ValidationError(
                f"Provided condition {condition} does not match the "
                f"variables of <{self.name}>."
            )
        self.cpt[condition] = probability

    # ----- parsing --------------------------------------------------------

    def _resolve(self, name: str) -> "Variable":
        if name == self.name:
            return self
        if self.network is not None and self.network.has_node(name):
            return self.network.get_node(name)
        raise ValidationError(f"No such variable <{name}>.")

    def parse_event(self, text: str) -> Event:
        """Parse ``"variable=value"`` into an :class:`Event`."""
        text = strip_whitespace(text)
        parts = text.split("=")
        if len(parts) != 2:
            raise ValidationError(
                f"Expected \"variable=value\", received \"{text}\"."
            )
        name, outcome = parts
        return Event.of(self._resolve(name), outcome)

    def parse_condition(self, text: str) -> Condition:
        """Parse a full ``parents + self`` assignment for this variable."""
        pieces = [p for p in strip_whitespace(text).split(",") if p]
        required = len(self.parents) + 1
        if len(pieces) != required:
            raise ValidationError(
                f"Number of events ({len(pieces)}) mismatches required "
                f"number ({required})."
            )
        return Condition(self.parse_event(p) for p in pieces)

    # ----- CPT lookup -----------------------------------------------------

    def probability(self, condition: Union[str, Condition]) -> float:
        """Return the CPT entry for *condition* (text or :class:`Condition`)."""
        if isinstance(condition, str):
            condition = self.parse_condition(condition)
        if self.cpt is None:
            raise ValidationError(
                f"Variable <{self.name}> has no conditional probability table."
            )
        try:
            return self.cpt[condition]
        except KeyError:
            raise ValidationError(
                f"Condition {condition} is not an entry of the table of "
                f"<{self.name}>."
            ) from None

    def __repr__(self) -> str:
        return (
            f"Variable(name={self.name!r}, "
            f"values={list(self.domain)}, "
            f"parents={[p.name for p in self.parents]})"
        )
