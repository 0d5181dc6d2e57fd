"""Per-application persistence state."""

from typing import Optional

from rentlog.persistence.interface import FileHandle


class PersistenceSession:
    """
    What the application remembers about "the current file".

    - retained_target: the handle that Save writes to. Only the
      handle-capable profile ever sets it.
    - display_name: the file name shown to the user, in both profiles.
      It is not part of the document.

    The gateway reads and updates the session it is given; it keeps no
    module-level state, so several sessions can coexist (one per test,
    one per browser tab).
    """

    def __init__(
        self,
        retained_target: Optional[FileHandle] = None,
        display_name: str = "",
    ):
        self.retained_target = retained_target
        self.display_name = display_name

    @property
    def has_target(self) -> bool:
        return self.retained_target is not None

    def retain(self, handle: FileHandle) -> None:
        """Make `handle` the target of every later Save."""
        self.retained_target = handle
        self.display_name = handle.name

    def __repr__(self) -> str:
        return (
            f"PersistenceSession(retained_target={self.retained_target!r}, "
            f"display_name={self.display_name!r})"
        )
