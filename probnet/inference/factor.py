"""Factor algebra for variable elimination.

A :class:`Factor` is a table over a subset of network variables that
maps each joint assignment (a :class:`~probnet.core.types.Condition`)
to a non-negative number.  Every operation returns a new factor; the
input factors and the network they were built from are never mutated.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from probnet.core.errors import ValidationError
from probnet.core.types import Condition, Event, Variable, all_conditions


def _sorted_scope(variables: Iterable[Variable]) -> Tuple[Variable, ...]:
    """Deduplicate *variables* by name and order them by name."""
    by_name: Dict[str, Variable] = {}
    for v in variables:
        by_name.setdefault(v.name, v)
    return tuple(by_name[name] for name in sorted(by_name))


class Factor:
    """A discrete factor (potential function) over a set of variables.

    Parameters
    ----------
    variables : iterable of Variable
        The scope of the factor.  Stored deduplicated and ordered by
        name, so the scope does not depend on the order given.
    table : dict of Condition -> float
        One entry per joint assignment of *variables*.
    """

    def __init__(
        self,
        variables: Iterable[Variable],
        table: Dict[Condition, float],
    ) -> None:
        self.variables: Tuple[Variable, ...] = _sorted_scope(variables)
        self.table: Dict[Condition, float] = table

    # ----- factory helpers ------------------------------------------------

    @classmethod
    def from_variable(
        cls,
        variable: Variable,
        evidence: Optional[Condition] = None,
    ) -> "Factor":
        """Build the factor of *variable*'s CPT, reduced by *evidence*.

        The factor starts over ``parents + [variable]``.  For each evidence
        event on one of those variables, rows disagreeing with the event
        are zeroed and the variable is summed out straight away, which
        keeps later joins small.
        """
        if variable.cpt is None:
            raise ValidationError(
                f"Variable <{variable.name}> has no conditional "
                f"probability table."
            )
        factor = cls(variable.family, dict(variable.cpt))

        for event in evidence or ():
            if factor.has_variable(event.variable):
                factor = factor.restrict(event).eliminate(event.variable)
        return factor

    # ----- accessors ------------------------------------------------------

    @property
    def variable_names(self) -> List[str]:
        return [v.name for v in self.variables]

    def has_variable(self, variable: Variable) -> bool:
        return any(v.name == variable.name for v in self.variables)

    def get(self, condition: Condition) -> Optional[float]:
        """Return the entry for *condition*, or None if absent."""
        return self.table.get(condition)

    def __getitem__(self, condition: Condition) -> float:
        return self.table[condition]

    def __len__(self) -> int:
        return len(self.table)

    def total(self) -> float:
        return sum(self.table.values())

    # ----- core operations ------------------------------------------------

    def restrict(self, event: Event) -> "Factor":
        """Zero every row that assigns another value to *event*'s variable.

        The scope and the set of rows are unchanged, so the result joins
        and eliminates like any other factor.
        """
        return Factor(
            self.variables,
            {c: (p if c.get(event.variable) in (None, event) else 0.0)
             for c, p in self.table.items()},
        )

    def eliminate(self, variable: Variable) -> "Factor":
        """Sum out (marginalize) *variable* from this factor.

        Returns a new :class:`Factor` whose table has one entry for every
        assignment of the remaining variables; each entry is the sum of
        the old rows extending that assignment.

        Raises
        ------
        ValueError
            If *variable* is not in the factor.
        """
        if not self.has_variable(variable):
            raise ValueError(
                f"This factor does not contain the variable "
                f"<{variable.name}> to eliminate."
            )
        remaining = [v for v in self.variables if v.name != variable.name]
        names = [v.name for v in remaining]

        new_table = {c: 0.0 for c in all_conditions(remaining)}
        for cond, prob in self.table.items():
            new_table[cond.project(names)] += prob
        return Factor(remaining, new_table)

    def join(self, other: "Factor") -> "Factor":
        """Point-wise product of two factors.

        The result ranges over the union of both scopes.  Each row's
        value is the product of the rows of ``self`` and *other* that
        the new assignment extends; a row missing from either input
        counts as 0.
        """
        combined = _sorted_scope(self.variables + other.variables)
        mine = self.variable_names
        theirs = other.variable_names

        new_table: Dict[Condition, float] = {}
        for cond in all_conditions(combined):
            new_table[cond] = (
                1.0
                * other.table.get(cond.project(theirs), 0.0)
                * self.table.get(cond.project(mine), 0.0)
            )
        return Factor(combined, new_table)

    def normalize(self) -> "Factor":
        """Return a copy normalized so that all entries sum to 1.

        A factor whose entries sum to zero is returned unchanged.
        """
        total = self.total()
        if total > 0:
            return Factor(
                self.variables,
                {c: p / total for c, p in self.table.items()},
            )
        return Factor(self.variables, dict(self.table))

    def __repr__(self) -> str:
        return f"Factor(variables={self.variable_names}, size={len(self)})"

    def __str__(self) -> str:
        return "\n".join(f"{c}: {p}" for c, p in self.table.items())


def join_all(factors: Iterable[Factor]) -> Factor:
    """Join a non-empty sequence of factors left to right."""
    factors = list(factors)
    if not factors:
        raise ValueError("join_all() requires at least one factor")
    result = factors[0]
    for f in factors[1:]:
        result = result.join(f)
    return result
