"""natded: a natural-deduction proof kernel.

Given a knowledge base of established facts and an explicit deduction,
the kernel checks the deduction rule by rule and returns the extended
set of facts it establishes. It never searches for proofs.

Subpackages:

- `logic`: formulas, derivation contexts, rules and their encoding.
- `global_params`: process-wide kernel configuration.
- `cli`: a command-line checker for JSON-encoded proofs.
"""

__version__ = "0.1.0"
