"""Headless display that keeps every frame it is given."""

from typing import Optional

from pingpong.types import Snapshot


class RecordingDisplay:
    """DisplaySink collecting snapshots, optionally only the last ``limit``."""

    def __init__(self, limit: Optional[int] = None):
        self.limit = limit
        self.snapshots: list[Snapshot] = []

    def render(self, snapshot: Snapshot) -> None:
        self.snapshots.append(snapshot)
        if self.limit is not None and len(self.snapshots) > self.limit:
            del self.snapshots[0]

    @property
    def last(self) -> Optional[Snapshot]:
        return self.snapshots[-1] if self.snapshots else None

    def messages(self) -> list[str]:
        return [s.message for s in self.snapshots if s.message]

    def speeds(self) -> list[float]:
        """Ball speed per rendered rally frame."""
        return [s.ball_speed for s in self.snapshots if s.phase == "rally" and not s.message]
