"""Editor launching."""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class EditorName(Enum):
    CURSOR = "cursor"
    VSCODE = "vscode"
    CLAUDE = "claude"

    @property
    def command(self) -> str:
        """CLI executable used to open a folder in this editor."""
        return _EDITOR_COMMANDS[self]

    @property
    def display_name(self) -> str:
        return _EDITOR_DISPLAY_NAMES[self]


_EDITOR_COMMANDS: dict[EditorName, str] = {
    EditorName.CURSOR: "cursor",
    EditorName.VSCODE: "code",
    EditorName.CLAUDE: "claude",
}

_EDITOR_DISPLAY_NAMES: dict[EditorName, str] = {
    EditorName.CURSOR: "Cursor",
    EditorName.VSCODE: "VS Code",
    EditorName.CLAUDE: "Claude Code",
}


class EditorOps(ABC):
    """Abstract interface for opening folders in an external editor."""

    @abstractmethod
    def is_available(self, editor: EditorName) -> bool:
        """Check whether the editor's CLI is on PATH."""
        ...

    @abstractmethod
    def open(self, editor: EditorName, folder: Path) -> None:
        """Open folder in editor.

        Raises:
            OSError: If the editor cannot be launched
            subprocess.CalledProcessError: If the editor CLI exits non-zero
        """
        ...


class RealEditorOps(EditorOps):
    """Production implementation that spawns the editor CLI."""

    def is_available(self, editor: EditorName) -> bool:
        return shutil.which(editor.command) is not None

    def open(self, editor: EditorName, folder: Path) -> None:
        logger.debug("Opening %s in %s", folder, editor.command)
        subprocess.run([editor.command, str(folder)], check=True)
