"""Compiled artifact / ABI file reader.

Reads Hardhat-style artifacts (``{"contractName": ..., "abi": [...]}``)
or bare ABI arrays, in JSON or YAML, into AbiEntry models.
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from abi_openapi.errors import ArtifactError, ArtifactNotFoundError
from abi_openapi.logging import get_logger

from .base import AbiEntry
from .detect import detect_format

logger = get_logger("artifact")

SKIPPED_DIRS = {"build-info", "node_modules"}


def load_abi(file_path: Path) -> list[AbiEntry]:
    """Load the ABI entries held by an artifact or bare ABI file."""
    _, entries = load_artifact(file_path)
    return entries


def load_artifact(file_path: Path) -> tuple[str | None, list[AbiEntry]]:
    """Load ``(contract_name, entries)``; the name is None for bare ABIs."""
    try:
        fmt = detect_format(file_path)
        if fmt == "unknown":
            raise ArtifactError(f"{file_path} is neither a compiled artifact nor an ABI array")
        data = _read(file_path)
    except (OSError, UnicodeDecodeError) as e:
        raise ArtifactError(f"Cannot read {file_path}: {e}") from e

    if fmt == "artifact":
        name, raw = data.get("contractName"), data["abi"]
    else:
        name, raw = None, data

    try:
        entries = [AbiEntry.model_validate(item) for item in raw]
    except ValidationError as e:
        raise ArtifactError(f"Invalid ABI in {file_path}: {e}") from e

    logger.debug("loaded %d ABI entries from %s", len(entries), file_path)
    return name, entries


def find_artifact(artifacts_dir: Path, contract_name: str) -> Path:
    """Locate ``<contract_name>.json`` anywhere below ``artifacts_dir``."""
    if not contract_name:
        raise ArtifactError("Invalid contract name")

    if artifacts_dir.is_dir():
        for candidate in sorted(artifacts_dir.rglob(f"{contract_name}.json")):
            if SKIPPED_DIRS.intersection(candidate.relative_to(artifacts_dir).parts):
                continue
            return candidate

    raise ArtifactNotFoundError(
        f'Contract "{contract_name}" not found in {artifacts_dir}. Compile the contracts first.'
    )


def read_artifact(artifacts_dir: Path, contract_name: str) -> list[AbiEntry]:
    """Find and load the compiled artifact for ``contract_name``."""
    return load_abi(find_artifact(artifacts_dir, contract_name))


def _read(file_path: Path):
    text = file_path.read_text(encoding="utf-8")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return json.loads(text)
