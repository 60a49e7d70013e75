import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from legend.breakdown import BreakdownEngine
from legend.config import Settings
from legend.errors import LegendError
from legend.registry import MetadataRegistry
from legend.resources import build_display_buckets
from legend.utils.logger_config import setup_logging

EXAMPLES_DIR = Path(__file__).parent / "examples"

logger = logging.getLogger(__name__)


def _load_json(path: Path):
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Print the contribution breakdown for one resource or stat."
    )
    parser.add_argument(
        "--session",
        type=Path,
        default=EXAMPLES_DIR / "session.json",
        help="JSON file with 'registries' and 'metadata' keys",
    )
    parser.add_argument(
        "--sources",
        type=Path,
        default=EXAMPLES_DIR / "sources.json",
        help="JSON file with 'values' and per-target 'sources' maps",
    )
    parser.add_argument("target", nargs="?", default="resource:core:gold")
    return parser.parse_args(argv)


def run(argv=None) -> int:
    args = parse_args(argv)
    settings = Settings.from_env()
    setup_logging(settings.log_level, emoji=settings.emoji_logs)

    session = _load_json(args.session)
    payload = _load_json(args.sources)
    values = payload.get("values", {})
    sources = payload.get("sources", {}).get(args.target, {})

    try:
        registry = MetadataRegistry(session.get("registries"), session.get("metadata"))
        engine = BreakdownEngine(registry, settings)
        groups = engine.summarize(args.target, sources, values)
    except LegendError as e:
        logger.error(f"Could not build breakdown for {args.target!r}: {e}")
        return 1

    buckets = build_display_buckets(registry.catalog, values)
    for entry in buckets.resources + buckets.stats:
        if entry.id == args.target:
            print(f"{entry.display.icon or ''} {entry.display.name}: {entry.value}".strip())
    for group in groups:
        print("\n".join(group.lines()))
    return 0


if __name__ == "__main__":
    load_dotenv()
    raise SystemExit(run())
