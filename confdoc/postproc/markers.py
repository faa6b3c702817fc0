"""Marker utilities for splicing generated tables into documents."""

from __future__ import annotations

import difflib
import os
import shutil
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from ..errors import MissingMarkerError, UnreadableDocumentError
from ..logging import get_logger

START_MARKER = "[//]: # (CONFIG_DOCS_START)"
END_MARKER = "[//]: # (CONFIG_DOCS_END)"


@dataclass
class PatchOutcome:
    """Result of patching one target document."""

    path: Path
    changed: bool
    diff: str
    dry_run: bool = False


class MarkerPatcher:
    """Replaces the content between marker pairs, leaving the rest untouched."""

    START = START_MARKER
    END = END_MARKER

    def __init__(self) -> None:
        self.logger = get_logger("markers")
        self._locks: Dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def regions(self, text: str) -> List[Tuple[int, int]]:
        """Return ``(body_start, body_end)`` offsets for each marker pair in order."""
        regions: List[Tuple[int, int]] = []
        position = 0
        while True:
            start_index = text.find(self.START, position)
            if start_index == -1:
                break
            body_start = start_index + len(self.START)
            end_index = text.find(self.END, body_start)
            if end_index == -1:
                break
            regions.append((body_start, end_index))
            position = end_index + len(self.END)
        return regions

    def extract(self, text: str) -> List[str]:
        """Return the current body of each marker pair, without the markers."""
        return [text[start:end].strip("\r\n") for start, end in self.regions(text)]

    def patch(self, text: str, body: str, *, slot: int = 0) -> str:
        """Replace the body of the ``slot``-th marker pair with ``body``."""
        regions = self.regions(text)
        if slot >= len(regions):
            if self.START not in text:
                raise MissingMarkerError(f"start marker {self.START!r} not found")
            if self.END not in text:
                raise MissingMarkerError(f"end marker {self.END!r} not found")
            raise MissingMarkerError(
                f"marker pair #{slot} requested but only {len(regions)} complete pair(s) found"
            )
        body_start, body_end = regions[slot]
        replacement = "\n" + body
        if not replacement.endswith("\n"):
            replacement += "\n"
        # The region takes the line ending that follows the start marker.
        if text.startswith("\r\n", body_start):
            replacement = replacement.replace("\r\n", "\n").replace("\n", "\r\n")
        return f"{text[:body_start]}{replacement}{text[body_end:]}"

    def patch_file(
        self, path: Path, body: str, *, slot: int = 0, dry_run: bool = False
    ) -> PatchOutcome:
        """Patch ``path`` in place; the file is rewritten only when content changes.

        A symlinked ``path`` updates the file it points to.
        """
        target = path.resolve()
        with self._acquire(target):
            try:
                original = target.read_bytes().decode("utf-8")
            except FileNotFoundError:
                raise MissingMarkerError(f"target document {path} does not exist") from None
            except UnicodeDecodeError as exc:
                raise UnreadableDocumentError(f"{path} is not valid UTF-8: {exc.reason}") from None
            try:
                updated = self.patch(original, body, slot=slot)
            except MissingMarkerError as exc:
                raise MissingMarkerError(f"{path}: {exc}") from None

            changed = updated != original
            diff = ""
            if changed:
                diff = "".join(
                    difflib.unified_diff(
                        original.splitlines(keepends=True),
                        updated.splitlines(keepends=True),
                        fromfile=f"{path} (current)",
                        tofile=f"{path} (generated)",
                    )
                )
            if changed and not dry_run:
                _atomic_write(target, updated)
                self.logger.info("Updated %s", path)
            elif not changed:
                self.logger.debug("%s already up to date", path)
            return PatchOutcome(path=path, changed=changed, diff=diff, dry_run=dry_run)

    @contextmanager
    def _acquire(self, path: Path) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(path, threading.Lock())
        with lock:
            yield


def _atomic_write(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        # mkstemp creates 0600 files; keep the mode of the document being replaced.
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


__all__ = ["END_MARKER", "MarkerPatcher", "PatchOutcome", "START_MARKER"]
