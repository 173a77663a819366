"""FileRegistry: uploaded files and the current selection."""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from dspflow.core.exceptions import FileNotRegisteredError
from dspflow.core.models import UploadedFile

logger = logging.getLogger(__name__)


class FileRegistry:
    """Ordered set of uploaded files plus the selected file name.

    Re-uploading a name appends a second entry rather than replacing the
    first; lookups by name resolve to the earliest entry with that name.
    """

    def __init__(self) -> None:
        self._files: list[UploadedFile] = []
        self._selected: str | None = None
        self._clear_listeners: list[Callable[[], None]] = []

    def on_clear(self, callback: Callable[[], None]) -> None:
        """Register a callback fired when clear() empties the registry."""
        self._clear_listeners.append(callback)

    def add(self, file: UploadedFile) -> None:
        """Append an accepted file. Selects it if nothing is selected yet."""
        self._files.append(file)
        if self._selected is None:
            self._selected = file.name
            logger.debug("Auto-selected %s", file.name)

    def select(self, name: str) -> None:
        """Select a registered file by name.

        Raises:
            FileNotRegisteredError: If no file with that name was added.
        """
        if not any(f.name == name for f in self._files):
            raise FileNotRegisteredError(name)
        self._selected = name

    def get(self, name: str) -> UploadedFile:
        """Return the first file registered under ``name``.

        Raises:
            FileNotRegisteredError: If no file with that name was added.
        """
        for f in self._files:
            if f.name == name:
                return f
        raise FileNotRegisteredError(name)

    @property
    def selected_name(self) -> str | None:
        return self._selected

    @property
    def selected(self) -> UploadedFile | None:
        """The selected file, or None."""
        if self._selected is None:
            return None
        return self.get(self._selected)

    @property
    def names(self) -> list[str]:
        return [f.name for f in self._files]

    def clear(self) -> None:
        """Remove all files and the selection, then notify listeners.

        A no-op on an already empty registry.
        """
        if not self._files and self._selected is None:
            return
        self._files.clear()
        self._selected = None
        for callback in self._clear_listeners:
            callback()

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[UploadedFile]:
        return iter(list(self._files))

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._files)
