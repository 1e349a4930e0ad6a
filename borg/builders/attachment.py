from __future__ import annotations
import shutil
from pathlib import Path

from tqdm import tqdm

from borg.context import BuildContext
from borg.discovery import FileSet
from borg.errors import BuildIOError
from borg.paths import relativize


class AttachmentCopier:
    """Copy every discovered file verbatim, mirroring the source layout.

    The first failure aborts the run; files copied before it stay in place.
    """

    def __init__(self, fileset: FileSet, ctx: BuildContext) -> None:
        self.fileset = fileset
        self.ctx = ctx

    def _copy_one(self, entry: Path) -> Path:
        rel = relativize(entry, self.fileset.source_root)
        dest = self.fileset.publish_root / rel
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(entry, dest)
        except OSError as e:
            raise BuildIOError(
                f"Could not copy {entry} to {dest}: {e.strerror or e}",
                path=entry,
                destination=dest,
            ) from e
        return dest

    def build(self) -> None:
        log = self.ctx.logger
        for entry in tqdm(self.fileset.entries, desc="Copying", unit="file",
                          disable=not self.ctx.progress):
            dest = self._copy_one(entry)
            log.debug("copied %s -> %s", entry, dest)
        log.info("Copied %d files to %s", len(self.fileset), self.fileset.publish_root)
