"""Prompt text for the diagram generation call.

Style and quality arrive as plain tags; the catalogs that expand them into
icon-pack guidance live outside this package.
"""

from __future__ import annotations

from diagrammer.spec.models import OutputKind

_SYSTEM_PROGRAM = """\
You are an expert cloud architect who draws architecture diagrams with the
Python `diagrams` library.

Diagram style: {style}
Quality level: {quality}

Respond with ONLY a JSON object with these fields:
  "name":        short kebab-case identifier, safe as a filename
  "title":       human readable title
  "description": one or two sentences
  "source_code": a complete, executable Python script

Rules for source_code:
1. Always use show=False and filename="OUTPUT_PATH".
2. Use \\n for line breaks in labels, never literal newlines inside strings.
3. Only import node classes that exist in the diagrams library.
"""

_SYSTEM_MARKUP = """\
You are an expert software architect who writes PlantUML diagrams.

Diagram style: {style}
Quality level: {quality}

Respond with ONLY a JSON object with these fields:
  "name":        short kebab-case identifier, safe as a filename
  "title":       human readable title
  "description": one or two sentences
  "source_code": a complete PlantUML document from @startuml to @enduml
"""

_USER = """\
Generate an architecture diagram for:

{description}

Respond with ONLY valid JSON containing name, title, description and source_code.
CRITICAL: escape line breaks inside JSON strings as \\n.
"""


def build_prompts(
    description: str,
    style: str,
    quality: str,
    output_kind: OutputKind = OutputKind.program,
) -> tuple[str, str]:
    """Return ``(system, user)`` prompts for one generation request."""
    template = _SYSTEM_MARKUP if output_kind is OutputKind.markup else _SYSTEM_PROGRAM
    return (
        template.format(style=style, quality=quality),
        _USER.format(description=description.strip()),
    )
