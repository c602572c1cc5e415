"""
Preview builder: the single place that decides whether a command may run.

Combines the parsed command, the validator and the person looked up by the
directory into a CommandPreview.
"""

from typing import List, Optional

from .duration import format_duration
from .models import (
    CATEGORY_COLLECTIONS,
    CATEGORY_DESCRIPTIONS,
    CATEGORY_LABELS,
    QUICK_SUGGESTIONS,
    CommandCategory,
    CommandPreview,
    ParsedCommand,
    ResolvedPerson,
)
from .rut import format_rut
from .validator import validate

MSG_INACTIVE_PERSON = "Esta persona está DESVINCULADA del sistema"
MSG_DIRECTORY_UNAVAILABLE = "Directorio de personal no disponible, no se pudo verificar el RUT"


def describe_action(parsed: ParsedCommand) -> str:
    """Human-readable summary, e.g. "Vacaciones del 2026-01-19 al 2026-01-23"."""
    action = CATEGORY_LABELS[parsed.category]

    start, end = parsed.start_date, parsed.end_date
    if start and end and start != end:
        action += f" del {start.isoformat()} al {end.isoformat()}"
    elif start:
        action += f" el {start.isoformat()}"

    if parsed.start_time and parsed.end_time:
        action += f" de {parsed.start_time} a {parsed.end_time}"
    elif parsed.start_time:
        action += f" a las {parsed.start_time}"

    if parsed.duration_days:
        action += f" ({format_duration(parsed.duration_days)})"

    return action


def build_preview(
    parsed: ParsedCommand,
    person: Optional[ResolvedPerson],
    directory_unavailable: bool = False,
) -> CommandPreview:
    """Build the execution preview for a parsed command and its person.

    directory_unavailable marks a lookup that failed rather than found
    nobody; the RUT is then not reported as unknown.
    """
    result = validate(parsed)
    warnings: List[str] = []

    if directory_unavailable:
        warnings.append(MSG_DIRECTORY_UNAVAILABLE)

    if person is not None and person.is_inactive:
        warnings.append(MSG_INACTIVE_PERSON)

    return CommandPreview(
        parsed_command=parsed,
        person=person,
        person_not_found=(
            parsed.normalized_identifier is not None and person is None and not directory_unavailable
        ),
        action_description=describe_action(parsed),
        target_collection=CATEGORY_COLLECTIONS[parsed.category],
        warnings=tuple(warnings),
        errors=tuple(result.errors),
        can_execute=result.is_valid and person is not None and not person.is_inactive,
    )


def format_preview(preview: CommandPreview) -> str:
    """Render a preview as plain text for chat-style surfaces."""
    parsed = preview.parsed_command
    lines = [f"**{preview.action_description}**"]

    if parsed.category == CommandCategory.UNKNOWN:
        lines.append("Prueba con:")
        lines.extend(f"- {suggestion}" for suggestion in QUICK_SUGGESTIONS)
    else:
        lines.append(f"Acción: {CATEGORY_DESCRIPTIONS[parsed.category]}")

    if preview.person is not None:
        person = preview.person
        role = f" ({person.role})" if person.role else ""
        lines.append(f"Persona: {person.full_name}{role}, RUT {format_rut(person.identifier)}")
    elif preview.person_not_found:
        lines.append(f"Persona: no se encontró personal con RUT {format_rut(parsed.normalized_identifier)}")

    if parsed.reason:
        lines.append(f"Motivo: {parsed.reason}")
    if preview.target_collection:
        lines.append(f"Destino: {preview.target_collection}")

    for warning in preview.warnings:
        lines.append(f"ADVERTENCIA: {warning}")
    for error in preview.errors:
        lines.append(f"ERROR: {error}")

    lines.append("Listo para ejecutar." if preview.can_execute else "No se puede ejecutar.")
    return "\n".join(lines)
