"""CLI tool for checking JSON-encoded natural-deduction proofs."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from natded.global_params import global_config
from natded.logic.deduction import Deduction
from natded.logic.encoding import from_data, loads
from natded.logic.formula import Formula
from natded.logic.knowledge_base import MemoryKnowledgeBase
from natded.utils.exceptions import NatDedException

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INPUT_ERROR = 2


def _read(path: str) -> str:
    try:
        with open(path, encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise NatDedException(f"{path}: cannot read file: {e}") from e


def load_knowledge_base(filename: Optional[str]) -> MemoryKnowledgeBase:
    """Load ``{"constants": [...], "theorems": [...]}`` into a knowledge base.

    Constants are declared before any theorem is checked, so theorems may
    mention every listed constant regardless of order.
    """
    kb = MemoryKnowledgeBase()
    if filename is None:
        return kb
    try:
        data = json.loads(_read(filename))
    except json.JSONDecodeError as e:
        raise NatDedException(f"{filename}: invalid JSON: {e}") from e
    except RecursionError as e:
        raise NatDedException(f"{filename}: JSON document is nested too deeply") from e
    if not isinstance(data, dict):
        raise NatDedException(f"{filename}: expected an object with constants and theorems")
    constants = data.get("constants", [])
    theorems = data.get("theorems", [])
    if not isinstance(constants, list) or not isinstance(theorems, list):
        raise NatDedException(f"{filename}: constants and theorems must be lists")
    for name in constants:
        try:
            kb.declare(name)
        except TypeError as e:
            raise NatDedException(f"{filename}: {e}") from e
    for item in theorems:
        theorem = from_data(item)
        if not isinstance(theorem, Formula):
            raise NatDedException(f"{filename}: theorem is not a formula: {item!r}")
        kb.add_theorem(theorem)
    logger.info("Loaded %d constants and %d theorems from %s",
                len(kb.constants), len(kb), filename)
    return kb


def check_proof(proof_file: str, kb_file: Optional[str] = None,
                goal_file: Optional[str] = None) -> int:
    """Check a proof file and print the outcome.

    Args:
        proof_file: JSON file holding an encoded deduction
        kb_file: Optional JSON knowledge base (constants and theorems)
        goal_file: Optional JSON file holding the encoded goal formula

    Returns:
        The process exit code.
    """
    kb = load_knowledge_base(kb_file)
    deduction = loads(_read(proof_file))
    if not isinstance(deduction, Deduction):
        raise NatDedException(f"{proof_file}: not a deduction")
    goal = None
    if goal_file is not None:
        goal = loads(_read(goal_file))
        if not isinstance(goal, Formula):
            raise NatDedException(f"{goal_file}: not a formula")

    result = deduction.apply(kb)
    if result.is_err():
        print(f"Proof failed: {result.message}")
        return EXIT_FAILED

    if goal is not None:
        try:
            proven = result.contains(goal)
        except RecursionError as e:
            raise NatDedException(f"{goal_file}: goal is nested too deeply") from e
        if proven:
            print(f"Theorem proven: {goal}")
            return EXIT_OK
        print(f"Proof checked but goal not established: {goal}")
        return EXIT_FAILED

    facts = list(result.facts())
    print(f"Proof checked: {len(facts)} facts established")
    for fact in reversed(facts):
        print(f"  {fact}")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the proof checker CLI."""
    parser = argparse.ArgumentParser(
        description="Check a natural-deduction proof against a knowledge base",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("proof", type=str, help="JSON-encoded deduction")

    parser.add_argument(
        "--kb",
        type=str,
        help="JSON knowledge base: {\"constants\": [...], \"theorems\": [...]}"
    )

    parser.add_argument(
        "--goal",
        type=str,
        help="JSON-encoded formula the proof must establish"
    )

    parser.add_argument(
        "--max-depth",
        type=int,
        help=f"Maximum proof nesting depth (default: {global_config.max_proof_depth})"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="DEBUG" if global_config.debug else "WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )

    args = parser.parse_args(argv)

    for path in (args.proof, args.kb, args.goal):
        if path is not None and not Path(path).is_file():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return EXIT_INPUT_ERROR

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    saved_depth = global_config.max_proof_depth
    try:
        if args.max_depth is not None:
            global_config.set_max_proof_depth(args.max_depth)
        return check_proof(args.proof, args.kb, args.goal)
    except NatDedException as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    finally:
        global_config.set_max_proof_depth(saved_depth)


if __name__ == "__main__":
    sys.exit(main())
