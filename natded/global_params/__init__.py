"""Global parameters module for natded.

This module provides access to the process-wide kernel configuration.
"""
from .params import global_config, KernelConfig, DEFAULT_MAX_PROOF_DEPTH
