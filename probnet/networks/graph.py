"""Network construction utilities for ProbNet."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from probnet.networks.dag import BayesianNetwork


def cpt_lines(
    name: str,
    states: Sequence[str],
    parent_names: Sequence[str],
    parent_states: Sequence[Sequence[str]],
    rows: np.ndarray,
) -> List[str]:
    """Render a CPT array as probability lines for :meth:`BayesianNetwork.add_node`.

    *rows* has shape ``(|parent_0|, ..., |parent_k|, |states|)``; its last
    axis indexes the variable's own states.
    """
    lines: List[str] = []
    for index in np.ndindex(*rows.shape):
        *parent_idx, state_idx = index
        events = [f"{name}={states[state_idx]}"]
        for p, states_p, i in zip(parent_names, parent_states, parent_idx):
            events.append(f"{p}={states_p[i]}")
        lines.append(f"{', '.join(events)} : {float(rows[index])!r}")
    return lines


def _random_rows(
    rng: np.random.Generator, parent_cards: Sequence[int], num_states: int,
) -> np.ndarray:
    rows = rng.dirichlet(np.ones(num_states), size=tuple(parent_cards) or None)
    return np.asarray(rows, dtype=np.float64).reshape(
        tuple(parent_cards) + (num_states,)
    )


def build_tree(
    num_nodes: int,
    num_states: int = 2,
    seed: Optional[int] = None,
) -> BayesianNetwork:
    """Build a tree-structured Bayesian network.

    Node ``X{i}``'s children are ``X{2i+1}`` and ``X{2i+2}``.  Every row
    of every CPT is drawn from a flat Dirichlet.
    """
    rng = np.random.default_rng(seed)
    states = [f"s{i}" for i in range(num_states)]
    bn = BayesianNetwork()

    for i in range(num_nodes):
        name = f"X{i}"
        parents = [] if i == 0 else [f"X{(i - 1) // 2}"]
        rows = _random_rows(rng, [num_states] * len(parents), num_states)
        lines = cpt_lines(name, states, parents, [states] * len(parents), rows)
        bn.add_node(name, states, parents, lines)

    return bn


def build_chain(
    num_nodes: int,
    num_states: int = 2,
    seed: Optional[int] = None,
) -> BayesianNetwork:
    """Build a chain-structured Bayesian network (Markov chain)."""
    rng = np.random.default_rng(seed)
    states = [f"s{i}" for i in range(num_states)]
    bn = BayesianNetwork()

    for i in range(num_nodes):
        name = f"X{i}"
        parents = [] if i == 0 else [f"X{i - 1}"]
        rows = _random_rows(rng, [num_states] * len(parents), num_states)
        lines = cpt_lines(name, states, parents, [states] * len(parents), rows)
        bn.add_node(name, states, parents, lines)

    return bn


def build_metastatic_cancer_network() -> BayesianNetwork:
    """Build the five-node metastatic cancer network.

    M (metastatic cancer) causes I (increased serum calcium) and
    B (brain tumour); I and B cause C (coma); B causes S (severe
    headaches).  ``T`` and ``F`` denote true and false.
    """
    net = BayesianNetwork()

    net.add_node("M", ["T", "F"], [], ["M = T: 0.2", "M = F: 0.8"])
    net.add_node("I", ["T", "F"], ["M"], [
        "I = T, M = T: 0.8",
        "I = T, M = F: 0.2",
        "I = F, M = T: 0.2",
        "I = F, M = F: 0.8",
    ])
    net.add_node("B", ["T", "F"], ["M"], [
        "B = T, M = T: 0.2",
        "B = T, M = F: 0.05",
        "B = F, M = T: 0.8",
        "B = F, M = F: 0.95",
    ])
    net.add_node("C", ["T", "F"], ["I", "B"], [
        "C = T, I = T, B = T: 0.8",
        "C = T, I = T, B = F: 0.8",
        "C = T, I = F, B = T: 0.8",
        "C = T, I = F, B = F: 0.05",
        "C = F, I = T, B = T: 0.2",
        "C = F, I = T, B = F: 0.2",
        "C = F, I = F, B = T: 0.2",
        "C = F, I = F, B = F: 0.95",
    ])
    net.add_node("S", ["T", "F"], ["B"], [
        "S = T, B = T: 0.8",
        "S = T, B = F: 0.6",
        "S = F, B = T: 0.2",
        "S = F, B = F: 0.4",
    ])
    return net
