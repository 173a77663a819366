"""YAML serialization for session state."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from dspflow.core.models import Visualization
from dspflow.core.params import ParameterStore

if TYPE_CHECKING:
    from dspflow.workflow.session import WorkflowSession


@dataclass
class SessionSnapshot:
    """Plain-data view of a WorkflowSession.

    Plot payloads and signal arrays are not included; the snapshot holds
    what is needed to restore the user's choices and to report status.
    """

    files: list[dict[str, str]] = field(default_factory=list)
    selected: str | None = None
    params: dict[str, Any] = field(default_factory=dict)
    modes: dict[str, str] = field(default_factory=dict)
    slots: dict[str, str] = field(default_factory=dict)
    statistics: dict[str, float] | None = None
    error: str | None = None

    @classmethod
    def from_session(cls, session: WorkflowSession) -> SessionSnapshot:
        store = session.params.to_dict()
        result = session.result
        return cls(
            files=[{"name": f.name, "path": str(f.path)} for f in session.files],
            selected=session.files.selected_name,
            params=store["params"],
            modes=store["modes"],
            slots={viz.value: slot.status.value for viz, slot in session.slots.items()},
            statistics=result.statistics.to_dict() if result is not None else None,
            error=session.error,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "files": self.files,
            "selected": self.selected,
            "params": self.params,
            "modes": self.modes,
            "slots": self.slots,
        }
        if self.statistics is not None:
            data["statistics"] = self.statistics
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionSnapshot:
        return cls(
            files=list(data.get("files", [])),
            selected=data.get("selected"),
            params=dict(data.get("params", {})),
            modes=dict(data.get("modes", {})),
            slots=dict(data.get("slots", {})),
            statistics=data.get("statistics"),
            error=data.get("error"),
        )

    def parameter_store(self) -> ParameterStore:
        """A ParameterStore holding the saved params and modes."""
        return ParameterStore.from_dict({"params": self.params, "modes": self.modes})

    def apply_to(self, session: WorkflowSession) -> None:
        """Restore saved parameters and display modes onto a session.

        Files are not re-uploaded; that needs the remote service.
        """
        session.params.update(**self.params)
        for key, value in self.modes.items():
            session.params.set_mode(Visualization(key), value)

    def save(self, path: Path | str) -> None:
        """Write the snapshot to a YAML file."""
        with open(Path(path), "w") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load(cls, path: Path | str) -> SessionSnapshot:
        """Read a snapshot from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file does not hold a mapping.
        """
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid session YAML: expected a mapping in {path}")
        return cls.from_dict(data)
