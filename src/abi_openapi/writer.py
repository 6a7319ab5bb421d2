"""Writes generated API documents to disk."""

import json
from pathlib import Path
from typing import Any

import yaml


def document_filename(contract_name: str, fmt: str = "json") -> str:
    return f"{contract_name}-openapi.{fmt}"


def render_document(document: dict[str, Any], fmt: str = "json") -> str:
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def write_document(document: dict[str, Any], output_dir: Path, contract_name: str, fmt: str = "json") -> Path:
    """Write ``document`` as ``<output_dir>/<contract>-openapi.<fmt>`` and return the path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / document_filename(contract_name, fmt)
    path.write_text(render_document(document, fmt), encoding="utf-8")
    return path
