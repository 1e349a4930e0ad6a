from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path

import logging


@dataclass
class BuildContext:
    """Per-build capabilities handed to every builder and generator.

    Attributes:
        root: Directory relative project paths resolve against (the site
              file's directory).
        logger: Where builders report; never a module-level logger.
        progress: Show tqdm progress bars while transforming files.
    """
    root: Path
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("borg"))
    progress: bool = False

    def for_project(self, name: str) -> "BuildContext":
        return BuildContext(root=self.root, logger=self.logger.getChild(name), progress=self.progress)
