"""Skeleton loader for JSON skeleton documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO

from ..animation.errors import DocumentError
from ..animation.skeleton import Skeleton, build_skeleton
from ..config.settings import PROJECT_ROOT

logger = logging.getLogger(__name__)


class SkeletonLoader:
    """Load skeletons from JSON documents."""

    def load(self, path: Path | str) -> Skeleton:
        """Load a skeleton from disk."""

        skeleton_path = Path(path)
        if not skeleton_path.is_absolute():
            skeleton_path = PROJECT_ROOT / skeleton_path
        skeleton_path = skeleton_path.resolve()

        if not skeleton_path.exists():
            raise FileNotFoundError(f"Skeleton file not found: {skeleton_path}")

        with skeleton_path.open("r", encoding="utf-8") as handle:
            try:
                skeleton = self.load_stream(handle)
            except DocumentError as exc:
                logger.warning("Failed to load skeleton '%s': %s", skeleton_path, exc)
                raise

        logger.info("Loaded skeleton %s: %r", skeleton_path.name, skeleton)
        return skeleton

    def load_stream(self, handle: IO[str]) -> Skeleton:
        """Load a skeleton from an open text stream."""

        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise DocumentError(f"Invalid JSON: {exc}") from exc
        return build_skeleton(payload)

    def load_string(self, text: str) -> Skeleton:
        """Load a skeleton from a JSON string."""

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentError(f"Invalid JSON: {exc}") from exc
        return build_skeleton(payload)
