"""
Generation pipeline: validate the descriptor snapshot, then synthesize code.

Validation failures are returned as diagnostics, never raised or displayed
here; the UI layer reports them through ``ErrorHandler.report_diagnostics``.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import logging

from .field_kinds import SynthesisOptions
from .field_model import FieldDescriptor
from .synthesizer import GeneratedCode, synthesize
from .validator import Diagnostic, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of one "generate" action.

    Attributes:
        code: Generated artifacts, None when validation rejected the fields
        diagnostics: Every diagnostic produced (errors and warnings)
    """
    code: Optional[GeneratedCode] = None
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.code is not None

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]


def generate_form_code(form_name: str, form_description: str, fields: Sequence[FieldDescriptor],
                       typescript: bool = True, use_router: bool = True,
                       options: Optional[SynthesisOptions] = None) -> GenerationResult:
    """
    Validate ``fields`` and, when they are acceptable, generate the form code.

    Args:
        form_name: Display name of the form
        form_description: Optional subtitle
        fields: Snapshot of the field set
        typescript: Emit TypeScript
        use_router: Emit next/router navigation after submit
        options: Configuration-driven synthesis settings

    Returns:
        GenerationResult with either the code or the blocking diagnostics
    """
    result = validate(fields)
    if not result.ok:
        logger.info(f"Generation aborted: {len(result.errors)} validation error(s)")
        return GenerationResult(code=None, diagnostics=result.diagnostics)

    code = synthesize(
        form_name,
        form_description,
        result.fields,
        typescript=typescript,
        use_router=use_router,
        options=options
    )
    logger.info(f"Generated form code for '{form_name}' with {len(result.fields)} fields")
    return GenerationResult(code=code, diagnostics=result.diagnostics)
