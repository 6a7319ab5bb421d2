"""Auto-detect the shape of an ABI source file."""

import json
from pathlib import Path

import yaml


def detect_format(file_path: Path) -> str:
    """Detect whether a file holds a compiled artifact or a bare ABI.

    Returns: 'artifact', 'abi', or 'unknown'.
    """
    text = file_path.read_text(encoding="utf-8")

    # YAML is a superset of JSON, so this covers both for well-formed input
    try:
        data = yaml.safe_load(text)
        fmt = _classify(data)
        if fmt != "unknown":
            return fmt
    except yaml.YAMLError:
        pass

    # Try JSON specifically (for JSON that trips the YAML scanner)
    try:
        return _classify(json.loads(text))
    except (json.JSONDecodeError, ValueError):
        pass

    return "unknown"


def _classify(data) -> str:
    if isinstance(data, dict) and isinstance(data.get("abi"), list):
        return "artifact"
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return "abi"
    return "unknown"
