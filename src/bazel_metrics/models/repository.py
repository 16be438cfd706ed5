"""Repository entity representing the source tree being scanned.

The Repository entity resolves the user-supplied path and validates that it
can be walked before the pipeline starts.
"""

from dataclasses import dataclass
from pathlib import Path

# Files that mark the root of a Bazel workspace
WORKSPACE_FILES = ("MODULE.bazel", "WORKSPACE", "WORKSPACE.bazel")


@dataclass
class Repository:
    """Source tree being scanned.

    Attributes:
        path: Absolute path to repository root
        name: Repository name (derived from path)

    Validation Rules:
        - path must exist and be a directory
        - path should contain a Bazel workspace file (warning if not)
    """

    path: Path
    name: str

    def __post_init__(self) -> None:
        """Normalise the repository path after initialization."""
        if isinstance(self.path, str):
            self.path = Path(self.path)

        self.path = self.path.resolve()

    def validate(self) -> list[str]:
        """Validate the repository path.

        Returns:
            List of validation warning messages (empty if valid)

        Raises:
            ValueError: If path does not exist or is not a directory
        """
        warnings: list[str] = []

        if not self.path.exists():
            raise ValueError(f"Repository path does not exist: {self.path}")

        if not self.path.is_dir():
            raise ValueError(f"Repository path is not a directory: {self.path}")

        if not self.is_bazel_workspace:
            warnings.append(
                f"No Bazel workspace file ({', '.join(WORKSPACE_FILES)}) found in {self.path}"
            )

        return warnings

    @property
    def is_bazel_workspace(self) -> bool:
        """Check if the root holds a Bazel workspace marker file."""
        return any((self.path / name).is_file() for name in WORKSPACE_FILES)

    @classmethod
    def from_path(cls, path: Path | str, name: str | None = None) -> "Repository":
        """Create a Repository from a path.

        Args:
            path: Path to the repository root
            name: Optional name override (defaults to directory name)

        Returns:
            Repository instance
        """
        path = Path(path).resolve()
        if name is None:
            name = path.name

        return cls(path=path, name=name)
