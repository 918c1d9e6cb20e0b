"""Configuration constants and display-label settings for threads-tree."""

import json
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path

from loguru import logger

# Directory with data. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.threads").expanduser(),
    Path("~/.local/share/threads").expanduser(),
]

DATA_FILE_NAME = "threads.json"
BACKUP_FILE_NAME = "threads.backup.json"
CONFIG_FILE_NAME = "config.json"

# API token location for the remote store. First file found is used.
API_TOKEN_FILES: list[Path] = [
    Path("~/.threads/api-token.txt").expanduser(),
    Path("~/.config/threads-api-token.txt").expanduser(),
]

API_BASE_URL: str | None = os.environ.get("THREADS_API_URL")

# Seconds to wait for the remote API.
API_TIMEOUT: float = 30.0


def resolve_data_directory() -> Path:
    """Return the data directory: $THREADS_DATA_DIR, else the first existing candidate."""
    env_dir = os.environ.get("THREADS_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]


@dataclass(frozen=True)
class NodeLabels:
    """Prefixes shown in front of each node type in the tree."""

    thread: str = ""
    container: str = "\U0001f4c1"
    group: str = "\U0001f3f7\ufe0f"


DEFAULT_LABELS = NodeLabels()

LABEL_KINDS = ("thread", "container", "group")


def load_labels(config_file: Path) -> NodeLabels:
    """Load labels from the config file, filling gaps with defaults.

    A missing or unreadable config file yields the defaults.
    """
    if not config_file.exists():
        return DEFAULT_LABELS

    try:
        raw = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Config file {} is corrupted, using default labels", config_file)
        return DEFAULT_LABELS

    stored = raw.get("labels") if isinstance(raw, dict) else None
    if not isinstance(stored, dict):
        return DEFAULT_LABELS
    overrides = {k: str(v) for k, v in stored.items() if k in LABEL_KINDS}
    return replace(DEFAULT_LABELS, **overrides)


def save_labels(config_file: Path, labels: NodeLabels) -> None:
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps({"labels": asdict(labels)}, indent=2), encoding="utf-8")


def set_label(config_file: Path, kind: str, value: str) -> NodeLabels:
    """Persist a single label and return the full updated set."""
    if kind not in LABEL_KINDS:
        msg = f"Unknown label kind {kind!r}, expected one of {LABEL_KINDS!r}"
        raise ValueError(msg)
    labels = replace(load_labels(config_file), **{kind: value})
    save_labels(config_file, labels)
    return labels


def reset_labels(config_file: Path) -> NodeLabels:
    save_labels(config_file, DEFAULT_LABELS)
    return DEFAULT_LABELS
