"""
In-memory implementation of the artifact writer.

Useful for testing and ephemeral sessions.
"""

from phaseguard.domain.exceptions import ConfigurationError
from phaseguard.domain.interfaces import ArtifactWriterInterface


class InMemoryArtifactWriter(ArtifactWriterInterface):
    """Keeps written artifacts in a dict keyed by ``directory/file_name``."""

    def __init__(
        self,
        fail_on: tuple[str, ...] = (),
        unwritable: bool = False,
    ) -> None:
        """
        Args:
            fail_on: File names whose write raises OSError
            unwritable: Make prepare() fail as an unusable directory would
        """
        self.files: dict[str, str] = {}
        self._fail_on = fail_on
        self._unwritable = unwritable

    def prepare(self, output_directory: str, task_directory_name: str | None) -> str:
        if self._unwritable:
            raise ConfigurationError(f"Output directory '{output_directory}' is not writable")
        if task_directory_name:
            return f"{output_directory}/{task_directory_name}"
        return output_directory

    def write(self, directory: str, file_name: str, content: str) -> str:
        if file_name in self._fail_on:
            raise OSError(f"Simulated write failure for {file_name}")
        location = f"{directory}/{file_name}"
        self.files[location] = content
        return location
