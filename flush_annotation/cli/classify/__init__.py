import json
import logging
from gettext import gettext as _
from pathlib import Path

logger = logging.getLogger(__name__)

COMMAND_DESCRIPTION = _("Classify a recorded stroke into a shape")


def command(subparser):
    subparser.add_argument(
        "points",
        type=Path,
        help=_("JSON file with a list of {x, y, t, pressure} samples or [x, y] pairs"),
    )
    subparser.add_argument(
        "--lenient",
        action="store_true",
        help=_("Skip the quadrant and radial consistency checks for circles"),
    )

    def handle(args):
        from flush_annotation.config import load_config
        from flush_annotation.core.annotation import Point
        from flush_annotation.core.gesture import classify

        if not args.points.is_file():
            raise SystemExit(
                _("Points file not found: {path}").format(path=args.points)
            )

        cfg = load_config()
        if args.lenient:
            cfg.classifier.circle.strict = False

        data = json.loads(args.points.read_text())
        points = [Point.from_dict(item) for item in data]
        logger.debug(_("Loaded {n} samples").format(n=len(points)))

        result = classify(points, cfg.classifier)
        print(json.dumps(result.to_dict(), indent=2))

    return handle
