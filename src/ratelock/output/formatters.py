"""Adapts a ServiceResult to the requested output mode.

Three modes, chosen by the global CLI flags:

* ``--json``: the result model serialized as-is (warnings included);
* ``-q/--quiet``: one bare value per line, suitable for scripts;
* default: Rich rendering, see :mod:`ratelock.output.renderers`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ratelock.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from ratelock.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format *result* for display according to *settings*."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
