from __future__ import annotations
from typing import Callable, Dict, Union

from borg.builders.attachment import AttachmentCopier
from borg.builders.html import DocumentExporter
from borg.context import BuildContext
from borg.discovery import FileSet
from borg.errors import ConfigError
from borg.site.models import Project, PublishAction

Builder = Union[AttachmentCopier, DocumentExporter]
# project + its file set + build context -> builder instance
BuilderFactory = Callable[[Project, FileSet, BuildContext], Builder]


def _mk_attachment(project: Project, fileset: FileSet, ctx: BuildContext) -> AttachmentCopier:
    return AttachmentCopier(fileset, ctx)


def _mk_to_html(project: Project, fileset: FileSet, ctx: BuildContext) -> DocumentExporter:
    return DocumentExporter(project, fileset, ctx)


# closed: one entry per PublishAction member
_BUILDERS: Dict[PublishAction, BuilderFactory] = {
    PublishAction.ATTACHMENT: _mk_attachment,
    PublishAction.TO_HTML: _mk_to_html,
}


def get_registry() -> Dict[PublishAction, BuilderFactory]:
    return dict(_BUILDERS)


def build_builder(project: Project, fileset: FileSet, ctx: BuildContext) -> Builder:
    action = project.publish_action
    if action not in _BUILDERS:
        raise ConfigError(f"Unsupported publish action '{action}' for project '{project.name}'")
    return _BUILDERS[action](project, fileset, ctx)
