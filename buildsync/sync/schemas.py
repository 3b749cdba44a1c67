import os
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field

from buildsync.errors import InvalidArgumentError


class Artifact(BaseModel):
    """A local build file, resolved once per sync call."""

    path: Path = Field(..., description="Absolute path to the build file")
    name: str = Field(..., description="Base name, used as the remote file name")

    @classmethod
    def from_path(cls, build_path: Union[str, "os.PathLike[str]"]) -> "Artifact":
        """
        Resolve *build_path* to an absolute path and derive its base name.

        Raises:
            InvalidArgumentError: *build_path* is not a string or path-like.
        """
        if not isinstance(build_path, (str, os.PathLike)):
            raise InvalidArgumentError(
                f"build path should be a string, got {type(build_path).__name__}"
            )
        raw = os.fspath(build_path)
        if not isinstance(raw, str):
            raise InvalidArgumentError("build path should be a string, got bytes")
        # Lexical only: a symlinked build keeps the link's name remotely.
        absolute = Path(os.path.abspath(raw))
        return cls(path=absolute, name=absolute.name)
