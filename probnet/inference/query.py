"""Query grammar for ProbNet inference engines.

Queries have the form::

    <target>=<value> | <evidence>=<value>, <evidence>=<value>, ...

Whitespace is insignificant and the ``|`` clause is optional.  The
shorthand form used by the command line driver, ``P(m|c,-s)``, is
converted to this grammar by :func:`convert_shorthand`.
"""

from __future__ import annotations

from typing import Tuple

from probnet.core.errors import QueryError, ValidationError
from probnet.core.types import Condition, Event, strip_whitespace
from probnet.networks.dag import BayesianNetwork


def parse_query(network: BayesianNetwork, query: str) -> Tuple[Event, Condition]:
    """Split *query* into its target event and evidence condition.

    Raises
    ------
    QueryError
        If the text is malformed, names an unknown variable or value,
        or assigns the target variable in the evidence as well.
    """
    text = strip_whitespace(query)
    parts = text.split("|")
    if len(parts) > 2 or not parts[0]:
        raise QueryError(
            f"Expected \"variable=value | evidence\", received \"{query}\"."
        )

    try:
        target = network.parse_event(parts[0])
        evidence = network.parse_condition(parts[1] if len(parts) > 1 else "")
    except ValidationError as exc:
        raise QueryError(f"Invalid query \"{query}\": {exc}") from exc

    if evidence.mentions(target.variable):
        raise QueryError(
            f"Query variable <{target.variable.name}> also appears in "
            f"the evidence of \"{query}\"."
        )
    return target, evidence


def _convert_literal(literal: str) -> str:
    literal = literal.upper()
    if literal.startswith("-"):
        return literal[1:] + "=F"
    return literal + "=T"


def convert_shorthand(query: str) -> str:
    """Convert ``"P(m|c,-s)"`` into ``"M=T | C=T, S=F"``.

    Variable names are upper-cased; a leading ``-`` denotes ``F``,
    anything else ``T``.
    """
    text = strip_whitespace(query)
    if not (text.upper().startswith("P(") and text.endswith(")")):
        raise QueryError(f"Expected \"P(x|y,-z)\", received \"{query}\".")

    inner = text[2:-1].split("|")
    if len(inner) > 2 or not inner[0]:
        raise QueryError(f"Expected \"P(x|y,-z)\", received \"{query}\".")

    result = _convert_literal(inner[0]) + " | "
    if len(inner) > 1:
        result += ", ".join(
            _convert_literal(e) for e in inner[1].split(",") if e
        )
    return result
