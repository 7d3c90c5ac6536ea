"""Per-file editing session state for presentation layers."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .config import ToolConfig
from .core import read_metadata, write_metadata
from .errors import MediaTagsError
from .models.descriptor import MediaDescriptor
from .models.tags import EditableTagSet

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class EditorSession:
    """State for one open file: what was read, what the user has edited.

    Only one load or save may be in flight at a time; starting another
    raises RuntimeError. A failed save keeps the edited values so the user
    can retry.
    """

    path: Path
    config: ToolConfig = field(default_factory=ToolConfig)
    descriptor: MediaDescriptor | None = None
    tags: EditableTagSet = field(default_factory=EditableTagSet)
    status: LoadStatus = LoadStatus.IDLE
    save_status: SaveStatus = SaveStatus.IDLE
    error: MediaTagsError | None = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    @property
    def busy(self) -> bool:
        return self.status is LoadStatus.LOADING or self.save_status is SaveStatus.SAVING

    def load(self) -> MediaDescriptor | None:
        """Read the file; on failure the session moves to the error state."""
        self._ensure_idle()
        self.status = LoadStatus.LOADING
        self.error = None
        try:
            descriptor = read_metadata(self.path, self.config)
        except MediaTagsError as e:
            logger.warning(f"Error reading metadata: {e}")
            self.descriptor = None
            self.status = LoadStatus.ERROR
            self.error = e
            return None

        self.descriptor = descriptor
        self.tags = EditableTagSet.from_descriptor(descriptor)
        self.status = LoadStatus.READY
        return descriptor

    def reload(self) -> MediaDescriptor | None:
        """Discard the current descriptor and edits and read the file again."""
        self.save_status = SaveStatus.IDLE
        return self.load()

    def update(self, name: str, value: str) -> None:
        """Change one editable field."""
        self.tags = self.tags.replace(**{name: value})
        self.save_status = SaveStatus.IDLE

    def save(self) -> bool:
        """Write the current edits. Returns True on success."""
        self._ensure_idle()
        if self.status is not LoadStatus.READY:
            raise RuntimeError("No metadata loaded")

        self.save_status = SaveStatus.SAVING
        self.error = None
        try:
            write_metadata(self.path, self.tags, self.config)
        except MediaTagsError as e:
            logger.warning(f"Failed to save metadata: {e}")
            self.save_status = SaveStatus.ERROR
            self.error = e
            return False

        self.save_status = SaveStatus.SUCCESS
        return True

    def _ensure_idle(self) -> None:
        if self.busy:
            raise RuntimeError(f"An operation is already in progress for {self.path.name}")
