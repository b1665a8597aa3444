"""Core pipeline - runs the configured Core passes over a compilation unit."""

import logging
from typing import List, Optional

from liberate.liberate_case import LiberateCase
from liberate.liberate_core import CoreProgram
from liberate.liberate_optimization_pass import CoreOptimizationPass, CorePassResult, CorePassStats
from liberate.liberate_pretty_printer import CorePrettyPrinter
from liberate.liberate_settings import LiberateSettings


class CorePipeline:
    """
    Core pass manager.

    Each pass runs exactly once, in order.  Liberate-case in particular must
    not be iterated to a fixed point: every run finds more call sites to
    duplicate.
    """

    def __init__(self, settings: Optional[LiberateSettings] = None):
        """
        Initialize the pipeline from settings.

        Args:
            settings: Pass settings (defaults used if None)
        """
        self.settings = settings if settings is not None else LiberateSettings.create_default()
        self._logger = logging.getLogger("CorePipeline")
        self._printer = CorePrettyPrinter()

        self.passes: List[CoreOptimizationPass] = []
        if self.settings.liberate_case:
            self.passes.append(LiberateCase(threshold=self.settings.threshold))

    def run(self, program: CoreProgram) -> CorePassResult:
        """
        Run every pass over *program*.

        Args:
            program: Top-level bindings in declaration order

        Returns:
            CorePassResult with the final program and the summed statistics
        """
        stats = CorePassStats()
        for core_pass in self.passes:
            self._logger.info("Running %s on %d bindings", core_pass.name, len(program))
            result = core_pass.run(program)
            program = result.program
            stats = stats.merge(result.stats)
            self._logger.info(
                "%s: %d simplifications, %d duplications",
                core_pass.name, result.stats.simplifications, result.stats.duplications
            )

            if self.settings.dump_output:
                self._logger.debug("%s output:\n%s", core_pass.name, self._printer.format_program(program))

        return CorePassResult(program=program, stats=stats)
