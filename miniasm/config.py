"""
Machine limits and modes.

The defaults below are the limits of the reference machine. A
MachineConfig bundles them so tests and the CLI can override one
without touching module state.
"""

import os
from dataclasses import dataclass


# =============================================================================
#  LIMITS
# =============================================================================
MAX_MEMORY_SIZE = 10_000_000     # cells in the memory pool
MAX_REFERENCE_DEPTH = 256        # chained loads a Value may request
TIME_LIMIT = 50_000_000          # total instruction cost per run
MAX_INTEGER_LENGTH = 10          # digits in an integer literal
MAX_LEXEME_LENGTH = 4096         # characters in a single token

INT_BITS = 32                    # machine word width


# =============================================================================
#  MODES
# =============================================================================
# Friendly mode zero-fills memory and unset operands instead of filling
# them with random garbage. Off by default; MINIASM_FRIENDLY=1 turns it on.
FRIENDLY_ENV = "MINIASM_FRIENDLY"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class MachineConfig:
    friendly: bool = False
    time_limit: int = TIME_LIMIT
    max_memory: int = MAX_MEMORY_SIZE
    max_depth: int = MAX_REFERENCE_DEPTH
    max_integer_length: int = MAX_INTEGER_LENGTH
    max_lexeme_length: int = MAX_LEXEME_LENGTH

    @classmethod
    def from_env(cls, **overrides) -> "MachineConfig":
        """Default config with friendly mode taken from the environment."""
        overrides.setdefault("friendly", _env_flag(FRIENDLY_ENV))
        return cls(**overrides)


DEFAULT_CONFIG = MachineConfig()
