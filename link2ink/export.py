# -*- coding: utf-8 -*-
"""
Artifact export.

Generated artifacts are kept as base64 strings in the slot and in history.
Saving one decodes the string back to bytes and writes it as
``<name>-v<N>.png`` in the export directory, one file per variation.
"""

import base64
import binascii
from pathlib import Path
from typing import List, Sequence, Union

from link2ink.errors import ExportError
from link2ink.logger_config import logger

DATA_URL_MARKER = ";base64,"


def artifact_filename(name: str, index: int) -> str:
    """File name for the ``index``-th (zero-based) variation."""
    return f"{name}-v{index + 1}.png"


def decode_artifact(data: str) -> bytes:
    """Decode a base64 artifact, accepting an optional ``data:`` URL prefix."""
    if data.startswith("data:") and DATA_URL_MARKER in data:
        data = data.split(DATA_URL_MARKER, 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ExportError(f"Artifact is not valid base64: {e}") from e


def save_artifacts(images: Sequence[str], directory: Union[str, Path], name: str) -> List[Path]:
    """Write every artifact to ``directory`` and return the written paths.

    Existing files with the same name are overwritten. All artifacts are
    decoded before anything is written, so a bad artifact leaves the
    directory untouched.

    Raises:
        ExportError: No artifacts, an undecodable artifact, or a write failure.
    """
    if not images:
        raise ExportError("There is nothing to save yet.")
    payloads = [decode_artifact(image) for image in images]

    directory = Path(directory).expanduser()
    paths = []
    try:
        directory.mkdir(parents=True, exist_ok=True)
        for index, payload in enumerate(payloads):
            path = directory / artifact_filename(name, index)
            path.write_bytes(payload)
            paths.append(path)
    except OSError as e:
        raise ExportError(f"Could not save artifacts to {directory}: {e}") from e

    logger.info("[Export] Saved {} artifact(s) to {}", len(paths), directory)
    return paths
