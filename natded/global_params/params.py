"""Process-wide kernel configuration.

The kernel has no files or executables to locate. Its only tunables
bound how much work a single proof check may do.
"""
import logging
import os
from typing import Optional

from natded.utils.exceptions import KernelConfigError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PROOF_DEPTH = 100


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "False").lower() in ("true", "1", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


class ConfigRegistry(type):
    """Metaclass implementing singleton pattern for KernelConfig.

    Ensures only one instance of KernelConfig exists throughout the application.
    """
    _instance = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class KernelConfig(metaclass=ConfigRegistry):
    """Global configuration for the proof kernel.

    Attributes:
        max_proof_depth: How deeply hypothetical sub-derivations and nested
            sequences may be stacked before evaluation gives up with an
            ``Err`` context.
        debug: Set from ``NATDED_DEBUG``; the CLI raises its log level to
            DEBUG when it is on.
    """

    def __init__(self):
        self.debug: bool = _env_flag("NATDED_DEBUG")
        self.max_proof_depth: int = DEFAULT_MAX_PROOF_DEPTH
        self.set_max_proof_depth(_env_int("NATDED_MAX_PROOF_DEPTH", DEFAULT_MAX_PROOF_DEPTH))

    def set_max_proof_depth(self, depth: int) -> None:
        """Set the nesting limit for proof evaluation.

        Raises:
            KernelConfigError: If ``depth`` is not a positive integer.
        """
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
            raise KernelConfigError(f"max_proof_depth must be a positive integer, got {depth!r}")
        self.max_proof_depth = depth

    def reset(self, max_proof_depth: Optional[int] = None) -> None:
        """Restore the defaults (or the given depth)."""
        if max_proof_depth is None:
            max_proof_depth = DEFAULT_MAX_PROOF_DEPTH
        self.set_max_proof_depth(max_proof_depth)

    def __repr__(self) -> str:
        return f"KernelConfig(max_proof_depth={self.max_proof_depth}, debug={self.debug})"


global_config = KernelConfig()
