"""File management utilities for the punchcard web interface.

Exported documents are handed to Gradio as file paths. This module keeps
those files in one directory per session and overwrites them on every
parameter change, so a session never accumulates more than one file per
output format.
"""

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

SESSION_DIR_PREFIX = "loom-punchcards-"


class SessionFileManager:
    """Manages temporary export files for a single UI session.

    Attributes:
        session_dir: Path to the session's temporary directory.
        current_files: Active file per file type (e.g. "svg", "text").
    """

    def __init__(self, session_id: str | None = None):
        """Create the session directory.

        Args:
            session_id: Optional unique session identifier. Without one, a
                fresh directory with a random name is created.
        """
        base_dir = os.environ.get("GRADIO_TEMP_DIR", tempfile.gettempdir())

        if session_id:
            self.session_dir = Path(base_dir) / f"{SESSION_DIR_PREFIX}{session_id}"
        else:
            self.session_dir = Path(tempfile.mkdtemp(prefix=SESSION_DIR_PREFIX, dir=base_dir))

        self.session_dir.mkdir(parents=True, exist_ok=True)
        self.current_files: dict[str, Path] = {}

    def get_temp_path(self, file_type: str, filename: str) -> str:
        """Return the path used for a file type, replacing any earlier one.

        Args:
            file_type: Kind of document, e.g. "svg" or "text".
            filename: File name to use inside the session directory.

        Returns:
            Absolute path as a string.
        """
        previous = self.current_files.get(file_type)
        file_path = self.session_dir / Path(filename).name
        if previous is not None and previous != file_path:
            self.cleanup_file(file_type)

        self.current_files[file_type] = file_path
        return str(file_path)

    def write_file(self, file_type: str, content: bytes, filename: str) -> str:
        """Write content atomically, overwriting an existing file.

        Args:
            file_type: Kind of document.
            content: Bytes to write.
            filename: File name inside the session directory.

        Returns:
            Path of the written file.
        """
        file_path = self.get_temp_path(file_type, filename)

        temp_path = file_path + ".tmp"
        with open(temp_path, "wb") as f:
            f.write(content)
        os.replace(temp_path, file_path)

        return file_path

    def cleanup_file(self, file_type: str) -> None:
        """Remove the file of one type if it exists."""
        file_path = self.current_files.pop(file_type, None)
        if file_path is not None and file_path.exists():
            try:
                file_path.unlink()
            except OSError as e:
                logger.warning(f"Could not remove {file_path}: {e}")

    def cleanup_all(self) -> None:
        """Remove all tracked files and the session directory.

        Safe to call multiple times.
        """
        for file_type in list(self.current_files):
            self.cleanup_file(file_type)

        if self.session_dir.exists():
            try:
                self.session_dir.rmdir()
            except OSError as e:
                logger.warning(f"Could not remove {self.session_dir}: {e}")

    def __del__(self):
        """Cleanup when the file manager is garbage collected."""
        self.cleanup_all()
