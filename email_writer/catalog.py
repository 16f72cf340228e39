"""Template catalog: loads templates from YAML, validates and caches them."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from email_writer.config import TEMPLATES_CONFIG_PATH
from email_writer.models.email import Template
from email_writer.utils.logger import get_logger

logger = get_logger("email_writer.catalog")

_templates: tuple[Template, ...] | None = None


def _get_catalog_path() -> Path:
    raw = os.environ.get("TEMPLATES_CONFIG_PATH", "").strip()
    if raw:
        return Path(raw)
    return TEMPLATES_CONFIG_PATH


def _validate_catalog(raw: Any, path: Path) -> tuple[Template, ...]:
    """Build Template models; ids must be unique and names must not collide."""
    if not isinstance(raw, dict):
        raise ValueError(f"Template catalog must be a YAML object (dict), got {type(raw)}")
    entries = raw.get("templates")
    if not isinstance(entries, list):
        raise ValueError(f"Template catalog {path} must contain a 'templates' list")
    templates: list[Template] = []
    seen_ids: set[str] = set()
    seen_names: set[str] = set()
    for index, entry in enumerate(entries):
        try:
            template = Template.model_validate(entry)
        except ValidationError as e:
            raise ValueError(f"Template #{index} in {path} is invalid: {e}") from e
        if template.id in seen_ids:
            raise ValueError(f"Duplicate template id {template.id!r} in {path}")
        if template.name in seen_names:
            raise ValueError(f"Duplicate template name {template.name!r} in {path}")
        seen_ids.add(template.id)
        seen_names.add(template.name)
        templates.append(template)
    return tuple(templates)


def _load_catalog() -> tuple[Template, ...]:
    global _templates
    if _templates is not None:
        return _templates
    path = _get_catalog_path()
    if not path.exists():
        raise FileNotFoundError(
            f"Template catalog not found: {path}. Set TEMPLATES_CONFIG_PATH or restore catalog.yaml."
        )
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in template catalog {path}: {e}") from e
    _templates = _validate_catalog(raw, path)
    logger.info("catalog.loaded", path=str(path), template_count=len(_templates))
    return _templates


def reload_catalog() -> tuple[Template, ...]:
    """Drop the cached catalog and read it again from disk."""
    global _templates
    _templates = None
    return _load_catalog()


def list_templates() -> tuple[Template, ...]:
    return _load_catalog()


def get_template(template_id: str) -> Template:
    """Return the template with this id. Raises ValueError if unknown."""
    for template in _load_catalog():
        if template.id == template_id:
            return template
    raise ValueError(
        f"Unknown template {template_id!r}. Known: {[t.id for t in _load_catalog()]}"
    )


def find_template(template_id: str | None = None, name: str | None = None) -> Template | None:
    """Look a template up by stable id, falling back to display name (older history entries)."""
    templates = _load_catalog()
    if template_id:
        for template in templates:
            if template.id == template_id:
                return template
    if name:
        for template in templates:
            if template.name == name:
                return template
    return None
