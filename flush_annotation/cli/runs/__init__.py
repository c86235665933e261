import json
import logging
from gettext import gettext as _
from pathlib import Path

logger = logging.getLogger(__name__)

COMMAND_DESCRIPTION = _("Flatten annotated text into highlighted runs")


def command(subparser):
    subparser.add_argument("content", type=Path, help=_("Plain text file"))
    subparser.add_argument(
        "annotations",
        type=Path,
        help=_("JSON file with the exported annotation list"),
    )

    def handle(args):
        from flush_annotation.config import load_config
        from flush_annotation.core import AnnotationSession
        from flush_annotation.core.annotation import AnnotationSet
        from flush_annotation.interfaces import RenderAdapter

        for path in (args.content, args.annotations):
            if not path.is_file():
                raise SystemExit(_("File not found: {path}").format(path=path))

        session = AnnotationSession(load_config())
        session.load_content(args.content.read_text())
        session.annotations = AnnotationSet.from_list(
            json.loads(args.annotations.read_text())
        )
        logger.debug(
            _("Loaded {n} annotations").format(n=len(session.annotations))
        )

        output = {
            "runs": RenderAdapter(session).get_segments(),
            "statistics": session.statistics(),
        }
        print(json.dumps(output, indent=2))

    return handle
