"""Bayesian network containers and builders for ProbNet."""

from probnet.networks.dag import BayesianNetwork, BuildResult
from probnet.networks.graph import (
    build_chain,
    build_metastatic_cancer_network,
    build_tree,
)

__all__ = [
    "BayesianNetwork",
    "BuildResult",
    "build_chain",
    "build_metastatic_cancer_network",
    "build_tree",
]
