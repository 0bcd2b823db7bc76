"""CLI entry point for Quotegate."""
import argparse
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from quotegate import __version__
from quotegate.config import load_settings
from quotegate.credibility import load_credibility_table
from quotegate.dedup import resolve
from quotegate.errors import ConfigError
from quotegate.fingerprint import exact_fingerprint, normalize
from quotegate.models import Candidate, SourceChannel, Statement
from quotegate.similarity import edit_distance, similarity
from quotegate.store import MemoryStatementStore
from quotegate.writer import CommentRecordWriter


def _load_pool(path: str) -> List[Candidate]:
    """Read a JSON list of candidate objects.

    Each object needs ``id`` and either ``normalized_content`` or ``content``;
    ``content_hash`` is derived from ``content`` when missing.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of candidates")
    pool = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"{path}: candidate entries must be JSON objects, got {item!r}")
        content = item.get("content", "")
        pool.append(Candidate(
            id=int(item["id"]),
            normalized_content=item.get("normalized_content", normalize(content)),
            content_hash=item.get("content_hash", exact_fingerprint(content)),
            duplicate_group=item.get("duplicate_group"),
            duplicate_of=item.get("duplicate_of"),
        ))
    return pool


def _cmd_fingerprint(args, console: Console) -> int:
    table = Table(show_header=False)
    table.add_row("sha256", exact_fingerprint(args.text))
    table.add_row("normalized", normalize(args.text))
    console.print(table)
    return 0


def _cmd_similarity(args, console: Console) -> int:
    a, b = (args.a, args.b) if args.raw else (normalize(args.a), normalize(args.b))
    console.print(f"similarity: [bold]{similarity(a, b):.4f}[/]  (edit distance {edit_distance(a, b)})")
    return 0


def _cmd_resolve(args, console: Console) -> int:
    try:
        pool = _load_pool(args.pool)
    except (OSError, ValueError, KeyError) as e:
        console.print(f"[red]Cannot read pool:[/] {e}")
        return 2
    try:
        statement = Statement(
            subject_id=args.subject,
            content=args.text,
            source_url=args.url,
            channel=SourceChannel.parse(args.channel),
            stated_at=args.stated_at,
        )
    except (ValueError, OverflowError) as e:
        console.print(f"[red]Invalid --stated-at:[/] {e}")
        return 2
    settings = load_settings()
    threshold = args.threshold if args.threshold is not None else settings.similarity_threshold
    verdict = resolve(args.subject, args.text, pool, threshold=threshold)
    if args.json:
        writer = CommentRecordWriter(MemoryStatementStore(), load_credibility_table(settings.credibility_file))
        print(json.dumps(writer.build(statement, verdict).to_dict(), ensure_ascii=False, indent=2))
        return 0
    table = Table(title=f"Subject {args.subject} — {len(pool)} candidates")
    table.add_column("classification")
    table.add_column("duplicate of")
    table.add_column("group")
    table.add_row(
        verdict.classification.value,
        "—" if verdict.duplicate_of is None else str(verdict.duplicate_of),
        verdict.duplicate_group,
    )
    console.print(table)
    for m in verdict.matches:
        console.print(f"  [dim]#{m.id}[/] {m.similarity:.0%}")
    return 0


def _cmd_limits(args, console: Console) -> int:
    settings = load_settings()
    table = Table(title="Effective settings")
    table.add_column("setting")
    table.add_column("value")
    for key, value in vars(settings).items():
        table.add_row(key, str(value))
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quotegate",
        description="Quotegate — duplicate detection and submission throttling for statements",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("fingerprint", help="Show the exact fingerprint and normalized form of TEXT")
    p.add_argument("text")
    p.set_defaults(func=_cmd_fingerprint)

    p = sub.add_parser("similarity", help="Edit-distance similarity between two texts")
    p.add_argument("a")
    p.add_argument("b")
    p.add_argument("--raw", action="store_true", help="Compare as given, without normalizing")
    p.set_defaults(func=_cmd_similarity)

    p = sub.add_parser("resolve", help="Classify TEXT against a JSON candidate pool")
    p.add_argument("text")
    p.add_argument("--subject", type=int, required=True, help="Subject id the statement is attributed to")
    p.add_argument("--pool", required=True, metavar="FILE", help="JSON list of candidates")
    p.add_argument("--threshold", type=float, default=None,
                   help="Fuzzy similarity threshold (default: from config, 0.85)")
    p.add_argument("--url", default="", help="Source URL of the statement")
    p.add_argument("--channel", default="OTHER", help="Source channel (NEWS, TWITTER, KNESSET, ...)")
    p.add_argument("--stated-at", default=None, metavar="WHEN",
                   help="When the statement was made (any date format; naive means UTC)")
    p.add_argument("--json", action="store_true", help="Print the record that would be stored, as JSON")
    p.set_defaults(func=_cmd_resolve)

    p = sub.add_parser("limits", help="Print effective rate-limit and dedup settings")
    p.set_defaults(func=_cmd_limits)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    console = Console()
    try:
        return args.func(args, console)
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/] {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
