"""Example usage of the ProbNet package.

This example demonstrates the core features of the ProbNet package including:
- Building a network from textual CPT lines
- Exact inference with variable elimination
- Approximate inference with Gibbs sampling
- Inspecting a variable's Markov blanket
"""

from probnet import BayesianNetwork, GibbsSampler, VariableElimination
from probnet.networks.graph import build_metastatic_cancer_network


def rain_network() -> BayesianNetwork:
    """Two-node network: Rain -> Umbrella."""
    bn = BayesianNetwork()
    bn.add_node("Rain", ["T", "F"], [], ["Rain=T : 0.3", "Rain=F : 0.7"])
    bn.add_node("Umbrella", ["T", "F"], ["Rain"], [
        "Umbrella=T, Rain=T : 0.9",
        "Umbrella=F, Rain=T : 0.1",
        "Umbrella=T, Rain=F : 0.2",
        "Umbrella=F, Rain=F : 0.8",
    ])
    return bn


def exact_inference_example():
    """Demonstrate variable elimination."""
    print("=" * 60)
    print("Variable Elimination Example")
    print("=" * 60)

    ve = VariableElimination(rain_network())
    print(f"   P(Umbrella=T)          = {ve.ask('Umbrella=T |')}")
    print(f"   P(Rain=T | Umbrella=T) = {ve.ask('Rain=T | Umbrella=T')}")


def gibbs_sampling_example():
    """Demonstrate Gibbs sampling against the exact answer."""
    print("\n" + "=" * 60)
    print("Gibbs Sampling Example")
    print("=" * 60)

    net = build_metastatic_cancer_network()
    query = "M=T | S=T, C=F"
    exact = VariableElimination(net).ask(query)
    print(f"   Exact:  P({query}) = {exact}")
    for n in (100, 1_000, 100_000):
        approx = GibbsSampler(net, n, seed=42).ask(query)
        print(f"   Gibbs ({n:>7} samples)    = {approx}")


def network_structure_example():
    """Demonstrate graph queries."""
    print("\n" + "=" * 60)
    print("Network Structure Example")
    print("=" * 60)

    net = build_metastatic_cancer_network()
    print(f"   Nodes: {net.nodes}")
    print(f"   Edges: {net.edges}")
    print(f"   Markov blanket of I: {sorted(net.markov_blanket('I'))}")


if __name__ == "__main__":
    exact_inference_example()
    gibbs_sampling_example()
    network_structure_example()
