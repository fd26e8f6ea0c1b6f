"""
Snapshot file persistence.

The core never touches the disk; this module is the caller that decides a
snapshot lives in a JSON file.

Concurrency Safety (single-process deployment):
- Uses file locking (fcntl on Unix, msvcrt on Windows) for file access
- Implements atomic writes via temp file + rename
"""

import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# Cross-platform file locking
if sys.platform == 'win32':
    import msvcrt

    def _lock_file(f, exclusive=True):
        """Acquire file lock on Windows."""
        msvcrt.locking(f.fileno(), msvcrt.LK_NBLCK if exclusive else msvcrt.LK_LOCK, 1)

    def _unlock_file(f):
        """Release file lock on Windows."""
        msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)
else:
    import fcntl

    def _lock_file(f, exclusive=True):
        """Acquire file lock on Unix."""
        fcntl.flock(f, fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)

    def _unlock_file(f):
        """Release file lock on Unix."""
        fcntl.flock(f, fcntl.LOCK_UN)


class SnapshotFile:
    """A graph snapshot stored as a JSON file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Optional[str]:
        """
        Read the snapshot text.

        Returns:
            The file contents, or None if the file does not exist
        """
        if not self.path.exists():
            logger.info(f"No graph file found at {self.path}")
            return None

        # Shared lock so we never read while another process writes
        with open(self.path, 'r', encoding='utf-8') as f:
            _lock_file(f, exclusive=False)
            try:
                return f.read()
            finally:
                _unlock_file(f)

    def write(self, snapshot: Dict[str, Any]) -> None:
        """
        Write a snapshot to the file.

        Atomic: Writes to temp file first, then renames to prevent corruption.
        File-locked: Uses OS-level locking to prevent concurrent writes.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        temp_fd, temp_path = tempfile.mkstemp(
            suffix='.json',
            prefix='graph_',
            dir=self.path.parent
        )

        try:
            with os.fdopen(temp_fd, 'w', encoding='utf-8') as f:
                _lock_file(f, exclusive=True)
                try:
                    json.dump(snapshot, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    _unlock_file(f)

            os.replace(temp_path, self.path)

            logger.info(
                f"Saved {len(snapshot.get('nodes', []))} nodes and "
                f"{len(snapshot.get('edges', []))} edges to {self.path}"
            )

        except Exception:
            # Clean up temp file on error
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
