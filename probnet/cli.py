"""Command line driver for ProbNet.

Two commands are available, both working on the metastatic cancer
network from :func:`~probnet.networks.graph.build_metastatic_cancer_network`:

``probnet infer``
    Reads from standard input: the engine line (``VE`` or
    ``MCMC <samples>``), the number of queries, then one query per line
    in the ``P(m|c,-s)`` shorthand.  Prints one probability per line.

``probnet time QUERY METHOD ITERATIONS [SAMPLES]``
    Times ``ITERATIONS`` evaluations of one shorthand query, e.g.
    ``probnet time "P(m|s,-c)" MCMC 1000 10``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import IO, Iterable, List, Optional

from probnet.benchmarks.timing import time_queries
from probnet.inference import make_engine
from probnet.inference.base import Inference
from probnet.inference.query import convert_shorthand
from probnet.networks.dag import BayesianNetwork
from probnet.networks.graph import build_metastatic_cancer_network

log = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> None:
    """Configure console logging for the command line tools."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] [%(name)s] - %(message)s",
    )


def engine_from_header(
    network: BayesianNetwork, header: str, seed: Optional[int] = None,
) -> Inference:
    """Build an engine from a header line such as ``"VE"`` or ``"MCMC 1000"``."""
    parts = header.split()
    if not parts:
        raise ValueError("Missing inference method line.")
    method = parts[0]
    n_samples = 0
    if method == "MCMC":
        if len(parts) < 2:
            raise ValueError("MCMC requires a sample count, e.g. 'MCMC 1000'.")
        n_samples = int(parts[1])
    return make_engine(network, method, n_samples=n_samples, seed=seed)


def run_infer(
    lines: Iterable[str],
    network: Optional[BayesianNetwork] = None,
    seed: Optional[int] = None,
) -> List[str]:
    """Answer the queries described by *lines* (see module docstring)."""
    it = iter(lines)
    try:
        header = next(it)
        n_lines = int(next(it).strip())
    except StopIteration:
        raise ValueError("Input must start with a method line and a query count.") from None

    if network is None:
        network = build_metastatic_cancer_network()
    engine = engine_from_header(network, header, seed=seed)

    answers: List[str] = []
    for _ in range(n_lines):
        try:
            line = next(it)
        except StopIteration:
            raise ValueError(
                f"Expected {n_lines} queries, received {len(answers)}."
            ) from None
        answers.append(engine.ask(convert_shorthand(line)))
    return answers


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="probnet",
        description="Inference on a discrete Bayesian network.",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for the Gibbs sampler random source.",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("infer", help="Answer queries read from standard input.")

    timer = sub.add_parser("time", help="Time repeated evaluation of a query.")
    timer.add_argument("query", help="Shorthand query, e.g. 'P(m|s,-c)'.")
    timer.add_argument("method", choices=["VE", "MCMC"])
    timer.add_argument("iterations", type=int)
    timer.add_argument("samples", type=int, nargs="?", default=0)
    return parser


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
) -> int:
    """Entry point of the ``probnet`` command."""
    args = _build_parser().parse_args(argv)
    setup_logging(args.log_level)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        if args.command == "infer":
            for answer in run_infer(stdin, seed=args.seed):
                stdout.write(answer + "\n")
        else:
            engine = make_engine(
                build_metastatic_cancer_network(), args.method,
                n_samples=args.samples, seed=args.seed,
            )
            stdout.write(
                f"{args.method} computing {args.query} with "
                f"{args.iterations} iterations.\n"
            )
            result = time_queries(
                engine, convert_shorthand(args.query), args.iterations,
            )
            stdout.write(f"{result.total_ms:.3f} ms\n")
    except ValueError as exc:
        log.error("%s", exc)
        return 1
    return 0
