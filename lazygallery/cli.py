"""Command-line front door for lazygallery.

Each subcommand drives one part of the browsing core against the local
filesystem: listing a folder's media, walking the folder tree, replaying a
startup restore from persisted state, and inspecting or changing the stored
preferences.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from loguru import logger

from .errors import LazyGalleryError
from .file_tree_model.fs import FilesystemLister
from .logging_config import configure_logging
from .media.decode import FileMediaDecoder
from .media.kinds import BrowseMode, MediaKind, classify
from .media.loading import DisplayPurpose, MediaDisplay, SourceKind
from .media.resolver import MediaEntryResolver
from .media.types import MediaEntry
from .paths import basename, normalize
from .runtime import persistence
from .runtime.persistence import PersistenceStore
from .runtime.session import BrowserSession
from .selection.slideshow import MAX_INTERVAL_SECONDS, MIN_INTERVAL_SECONDS, valid_interval
from .tree_model.model import DirectoryTreeModel
from .tree_model.rendering import format_tree_rows
from .tree_model.restore import RestoreEngine

VALUE_DISPLAY_LIMIT = 80


def _interval(value: str) -> int:
    """argparse type for slideshow intervals."""
    parsed = valid_interval(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(
            f"interval must be between {MIN_INTERVAL_SECONDS} and {MAX_INTERVAL_SECONDS} seconds"
        )
    return parsed


def truncate_value(value: str, limit: int = VALUE_DISPLAY_LIMIT) -> str:
    """Shorten long values for display, keeping ``limit`` characters in total."""
    if len(value) <= limit:
        return value
    return value[: limit - 3] + "..."


def make_lister(args: argparse.Namespace) -> FilesystemLister:
    """Build the filesystem lister honoring the hidden-file preference."""
    return FilesystemLister(
        show_hidden=persistence.load_show_hidden(),
        include_filesystem_root=getattr(args, "filesystem_root", False),
    )


def _mode(args: argparse.Namespace) -> BrowseMode:
    return BrowseMode.MUSIC if getattr(args, "music", False) else BrowseMode.GALLERY


async def _list_media(args: argparse.Namespace) -> None:
    resolver = MediaEntryResolver(make_lister(args), _mode(args))
    entries, error = await resolver.resolve(normalize(args.folder))
    if error is not None:
        raise SystemExit(f"{args.folder}: {error.message}")
    for entry in entries:
        print(f"{entry.kind.value}\t{entry.display_name}")


async def _show_tree(args: argparse.Namespace) -> None:
    tree = DirectoryTreeModel(make_lister(args))
    error = await tree.load_roots()
    if error is not None:
        raise SystemExit(error.message)
    result = await RestoreEngine(tree).restore_or_default(args.restore)
    if result is not None and not result.restored:
        logger.info("Restore stopped at {}", result.missing_segment or result.target)
    for row in format_tree_rows(tree):
        print(row)


async def _replay_restore(args: argparse.Namespace) -> None:
    store = PersistenceStore()
    session = BrowserSession(make_lister(args), store, mode=_mode(args))
    result = await session.start()
    await store.flush()
    if result is not None and not result.restored:
        logger.info("Restore stopped at {}", result.missing_segment or result.target)
    if session.folder_error is not None:
        raise SystemExit(f"{session.current_folder}: {session.folder_error.message}")
    current = session.current_entry()
    print(f"folder\t{session.current_folder or '(none)'}")
    print(f"selected\t{current.path if current else '(none)'}")


def _show_state(args: argparse.Namespace) -> None:
    print(f"State file: {PersistenceStore().location}")
    values = persistence.all_values()
    if not values:
        print("(no persisted state)")
        return
    for key, value in values.items():
        print(f"{key}\t{truncate_value(value)}")


def _configure(args: argparse.Namespace) -> None:
    if args.show_hidden is not None:
        persistence.save_show_hidden(args.show_hidden == "on")
    if args.slideshow_interval is not None:
        persistence.save_slideshow_interval(args.slideshow_interval)
    print(f"{persistence.SHOW_HIDDEN_KEY}\t{'on' if persistence.load_show_hidden() else 'off'}")
    print(f"{persistence.SLIDESHOW_INTERVAL_KEY}\t{persistence.load_slideshow_interval()}")


async def _preview(args: argparse.Namespace) -> None:
    path = normalize(args.file)
    name = basename(path)
    kind = classify(name)
    if kind is MediaKind.UNSUPPORTED:
        raise SystemExit(f"Unsupported media type: {name}")
    purpose = DisplayPurpose.THUMBNAIL if args.thumbnail else DisplayPurpose.PREVIEW
    display = MediaDisplay(MediaEntry(path=path, display_name=name, kind=kind), FileMediaDecoder(), purpose=purpose)
    source = await display.start()
    if args.inline and source.kind is SourceKind.ASSET:
        source = await display.report_failure("inline data requested")
    value = source.value
    if source.kind is SourceKind.DATA:
        value = f"{truncate_value(value, 48)} ({len(value)} chars)"
    print(f"{source.kind.value}\t{value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazygallery",
        description="Browse media folders lazily and inspect the persisted browsing state.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Print the media sequence of FOLDER.")
    list_parser.add_argument("folder")
    list_parser.add_argument("--music", action="store_true", help="List audio tracks instead of gallery media.")
    list_parser.set_defaults(handler=lambda args: asyncio.run(_list_media(args)))

    tree_parser = subparsers.add_parser("tree", help="Print the folder tree, optionally reopened at PATH.")
    tree_parser.add_argument("--restore", metavar="PATH", default=None)
    tree_parser.add_argument(
        "--filesystem-root",
        action="store_true",
        help="Offer the filesystem root next to the home folder (non-Windows).",
    )
    tree_parser.set_defaults(handler=lambda args: asyncio.run(_show_tree(args)))

    restore_parser = subparsers.add_parser("restore", help="Replay the startup restore from persisted state.")
    restore_parser.add_argument("--music", action="store_true", help="Restore the music pane.")
    restore_parser.add_argument("--filesystem-root", action="store_true")
    restore_parser.set_defaults(handler=lambda args: asyncio.run(_replay_restore(args)))

    state_parser = subparsers.add_parser("state", help="Print the state file location and stored keys.")
    state_parser.set_defaults(handler=_show_state)

    config_parser = subparsers.add_parser("config", help="Show or change viewer preferences.")
    config_parser.add_argument("--show-hidden", choices=("on", "off"), default=None)
    config_parser.add_argument("--slideshow-interval", type=_interval, default=None, metavar="SECONDS")
    config_parser.set_defaults(handler=_configure)

    preview_parser = subparsers.add_parser("preview", help="Print the first display source for FILE.")
    preview_parser.add_argument("file")
    preview_parser.add_argument("--thumbnail", action="store_true", help="Resolve a grid thumbnail.")
    preview_parser.add_argument("--inline", action="store_true", help="Skip the file URL and inline the data.")
    preview_parser.set_defaults(handler=lambda args: asyncio.run(_preview(args)))
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one subcommand.

    ``argv`` is primarily for tests; when omitted ``sys.argv`` is used.
    Library errors end the process with their message as exit status.
    """
    args = build_parser().parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(verbose=args.verbose)
    try:
        args.handler(args)
    except LazyGalleryError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
