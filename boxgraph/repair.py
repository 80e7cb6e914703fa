"""Context-rich error templates and repair prompts."""

from __future__ import annotations

import json
import re

from .models import ErrorTemplate, ErrorTemplateSet, Legend, utc_timestamp

TEMPLATE_PROTOCOL = "City of Boxes Context-Rich Errors"
TEMPLATE_VERSION = "1.0"

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def generate_error_templates(legend: Legend, *, created: str | None = None) -> ErrorTemplateSet:
    """Return one template per box.

    Only the shape is defined here. The ``{{...}}`` placeholders are filled by
    whoever catches the runtime error.
    """
    templates = ErrorTemplateSet(
        protocol=TEMPLATE_PROTOCOL,
        version=TEMPLATE_VERSION,
        created=created or utc_timestamp(),
    )
    for box_id, box in legend.boxes.items():
        contract = box.contract
        templates.templates[box_id] = ErrorTemplate(
            box_id=box_id,
            box_path=box.path,
            definition=box.description,
            purpose=box.ai_context,
            contract=contract,
            runtime_template={
                "timestamp": "{{timestamp}}",
                "inputReceived": "{{input}}",
                "expectedInput": {name: dict(spec) for name, spec in contract.inputs.items()},
                "stackTrace": "{{stack}}",
                "systemState": "{{state}}",
            },
            repair_prompt=(
                f"You are repairing the {box_id} module. "
                f"This module's purpose is: {box.description}. "
                f"It requires these inputs: {json.dumps(contract.inputs, separators=(',', ':'))}. "
                "The error occurred because: {{error_reason}}. "
                "To fix this, you should: {{suggested_fix}}"
            ),
        )
    return templates


def render_repair_prompt(template: ErrorTemplate, **values: object) -> str:
    """Fill ``{{name}}`` placeholders in the repair prompt; unknown names stay put."""

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, template.repair_prompt)


__all__ = ["generate_error_templates", "render_repair_prompt"]
