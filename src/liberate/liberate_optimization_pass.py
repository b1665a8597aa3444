"""
Core optimization pass base class.

Each pass takes a whole compilation unit (the ordered list of top-level
bindings) and returns a new one together with statistics describing what it
did.  A pass must not mutate its input.
"""

from dataclasses import dataclass, field

from liberate.liberate_core import CoreProgram


@dataclass
class CorePassStats:
    """
    Statistics reported by a pass.

    simplifications
        Counted simplifications, as reported to the rest of the pipeline.

    duplications
        Number of call sites wrapped with a private copy of their recursive
        group.  Informational only; not a simplification.
    """
    simplifications: int = 0
    duplications: int = 0

    def merge(self, other: 'CorePassStats') -> 'CorePassStats':
        """Return the sum of these statistics and *other*."""
        return CorePassStats(
            simplifications=self.simplifications + other.simplifications,
            duplications=self.duplications + other.duplications,
        )


@dataclass
class CorePassResult:
    """Output of a pass: the rewritten program and its statistics."""
    program: CoreProgram
    stats: CorePassStats = field(default_factory=CorePassStats)


class CoreOptimizationPass:
    """Base class for Core optimization passes."""

    name = "core-pass"

    def run(self, program: CoreProgram) -> CorePassResult:
        """
        Transform *program*, returning a rewritten copy and statistics.

        Args:
            program: Top-level bindings in declaration order.

        Returns:
            CorePassResult holding the new bindings, in the same order, and
            the pass statistics.
        """
        raise NotImplementedError
