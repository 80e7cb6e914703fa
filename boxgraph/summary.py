"""Human-readable digest of a knowledge graph build."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence

from jinja2 import Environment, FileSystemLoader

from .models import ErrorTemplateSet, Legend, SearchIndex, utc_timestamp

KEY_BOXES: tuple[str, ...] = ("ScriptBox", "MainBox", "InitBox", "BitcoinrpcBox", "WalletBox")
CATEGORY_PREVIEW = 5

_TEMPLATES_DIR = Path(__file__).parent / "templates"
_SUMMARY_TEMPLATE = "summary.md.j2"


def _create_env(templates_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_summary(
    legend: Legend,
    search_index: SearchIndex,
    templates: ErrorTemplateSet,
    *,
    output_dir: str = "project-knowledge",
    key_boxes: Sequence[str] = KEY_BOXES,
    generated: str | None = None,
    templates_dir: Path = _TEMPLATES_DIR,
) -> str:
    categories: List[Dict[str, object]] = []
    for name, box_ids in legend.categories.items():
        categories.append(
            {
                "name": name,
                "count": len(box_ids),
                "preview": box_ids[:CATEGORY_PREVIEW],
                "remaining": max(0, len(box_ids) - CATEGORY_PREVIEW),
            }
        )

    template = _create_env(templates_dir).get_template(_SUMMARY_TEMPLATE)
    return template.render(
        project=legend.metadata.project,
        protocol=legend.metadata.protocol,
        generated=generated or utc_timestamp(),
        total_boxes=len(legend.boxes),
        total_embeddings=len(search_index.vectors),
        total_templates=len(templates.templates),
        categories=categories,
        key_boxes=[legend.boxes[box_id] for box_id in key_boxes if box_id in legend.boxes],
        output_dir=output_dir,
    )


__all__ = ["KEY_BOXES", "render_summary"]
