"""
Filesystem implementation of the artifact writer.

Resolves the output directory against a base directory, verifies it is
writable with a probe file, and writes artifacts atomically.
"""

import logging
from pathlib import Path

from phaseguard.domain.exceptions import ConfigurationError
from phaseguard.domain.interfaces import ArtifactWriterInterface
from phaseguard.domain.naming import resolve_output_directory

logger = logging.getLogger(__name__)

WRITE_PROBE_NAME = ".write-test"


class FilesystemArtifactWriter(ArtifactWriterInterface):
    """
    Writes phase artifacts under ``<base>/<output_directory>[/<task>]``.

    Relative output directories resolve against ``base_dir``; absolute ones
    are used as given.
    """

    def __init__(self, base_dir: str | Path):
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def prepare(self, output_directory: str, task_directory_name: str | None) -> str:
        root = Path(resolve_output_directory(output_directory, str(self._base_dir)))
        target = root / task_directory_name if task_directory_name else root
        try:
            target.mkdir(parents=True, exist_ok=True)
            probe = target / WRITE_PROBE_NAME
            probe.write_text("ok")
            probe.unlink()
        except OSError as e:
            raise ConfigurationError(
                f"Output directory '{target}' is not writable: {e}",
                resolution="Choose an output directory the server can create and write to",
            ) from e
        logger.debug("Prepared output directory %s", target)
        return str(target)

    def write(self, directory: str, file_name: str, content: str) -> str:
        path = Path(directory) / file_name
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        temp_path.write_text(content, encoding="utf-8")
        temp_path.replace(path)  # Atomic on POSIX
        return str(path)
