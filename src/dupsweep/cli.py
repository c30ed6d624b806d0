#!/usr/bin/env python3
"""
dupsweep CLI — duplicate finder, large-file finder and disk-usage report.
Uses the same core engine as the GUI worker with console-based interaction.
All removals are safe: files are moved to the system trash, never erased.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import signal
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional, NoReturn

from dupsweep.aliases import (
    EPILOG_TEXT, GROUP_SORT_ALIASES, GROUP_SORT_CHOICES, GROUP_SORT_HELP_TEXT,
    LARGE_SORT_ALIASES, LARGE_SORT_CHOICES, PARTIAL_HASH_HELP_TEXT
)
from dupsweep.commands import (
    DiskUsageCommand, DuplicateScanCommand, LargeFileScanCommand, ScanCommand
)
from dupsweep.core.disk_usage import storage_overview
from dupsweep.core.models import (
    DEFAULT_EXCLUDED_NAMES, DuplicateGroup, DuplicateScanParams, FileSizeFilter, LargeFile,
    LargeFileScanParams, PARTIAL_ALGORITHMS, TrashResult
)
from dupsweep.core.scanner import default_roots
from dupsweep.core.sorter import Sorter
from dupsweep.services.duplicate_service import SelectionState
from dupsweep.utils.convert_utils import ConvertUtils

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._cancelled: bool = False

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="dupsweep",
            description="dupsweep — find duplicate and large files, see what takes space",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Options shared by every subcommand
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument("--quiet", "-q", action="store_true", help="Suppress non-essential output")
        common.add_argument("--verbose", "-v", action="store_true", help="Show progress and statistics")
        common.add_argument("--debug", action="store_true", help="Enable debug logging")

        scan_common = argparse.ArgumentParser(add_help=False)
        scan_common.add_argument(
            "roots", nargs="*", metavar="ROOT",
            help="Directories to scan. Default: Desktop, Documents, Downloads, Movies, Music, Pictures"
        )
        scan_common.add_argument(
            "--excluded-dirs", "-e", nargs="+", default=[], metavar='', dest="excluded_dirs",
            help="Directories (space separated) to skip together with everything below them"
        )
        scan_common.add_argument(
            "--exclude-name", nargs="+", default=None, metavar='', dest="excluded_names",
            help="Directory names to skip wherever they appear.\n"
                 f"Default: {' '.join(DEFAULT_EXCLUDED_NAMES)}"
        )
        scan_common.add_argument(
            "--force", action="store_true",
            help="Skip the confirmation prompt before trashing (for automation/scripts)"
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        dup = subparsers.add_parser(
            "duplicates", parents=[common, scan_common], formatter_class=argparse.RawTextHelpFormatter,
            help="Find byte-identical files"
        )
        dup.add_argument("--min-size", "-m", default="1K", metavar='',
                         help="Minimum file size (e.g., 500KB, 1MB). Default: 1K")
        dup.add_argument("--max-size", "-M", default="", metavar='',
                         help="Maximum file size (e.g., 10MB, 1GB). Default: no limit")
        dup.add_argument("--extensions", "-x", nargs="+", default=[], metavar='',
                         help="File extensions (space separated) to include (e.g., .jpg png)")
        dup.add_argument("--partial-hash", choices=PARTIAL_ALGORITHMS, default="sha256",
                         help=PARTIAL_HASH_HELP_TEXT)
        dup.add_argument("--sort", choices=GROUP_SORT_CHOICES, default="size-desc",
                         help=GROUP_SORT_HELP_TEXT)
        dup.add_argument("--trash-duplicates", action="store_true",
                         help="Move every non-original copy to trash. Always shows a preview first.")

        large = subparsers.add_parser(
            "large", parents=[common, scan_common], formatter_class=argparse.RawTextHelpFormatter,
            help="List files above a size threshold"
        )
        large.add_argument("--threshold", "-t", default="100M", metavar='',
                           help="Minimum size of a reported file (e.g., 100M, 500M, 1G). Default: 100M\n"
                                f"Common presets: {', '.join(f.display_name for f in FileSizeFilter)}")
        large.add_argument("--sort", choices=LARGE_SORT_CHOICES, default="size-desc",
                           help="Order of the listing. Default: size-desc")
        large.add_argument("--trash", action="store_true",
                           help="Move every listed file to trash. Always shows a preview first.")

        usage = subparsers.add_parser(
            "usage", parents=[common], help="Show the size of each item in a directory"
        )
        usage.add_argument("path", nargs="?", default=str(Path.home()), help="Directory. Default: home")

        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        return self.build_parser().parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        wants_trash = getattr(args, "trash_duplicates", False) or getattr(args, "trash", False)
        if getattr(args, "force", False) and not wants_trash:
            self.error_exit("--force can only be used together with a trash option")

        # Prevent interactive confirmation in non-TTY environments
        if wants_trash and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        for root in getattr(args, "roots", []) or []:
            root_path = Path(root).expanduser()
            if not root_path.exists():
                self.warning(f"Directory not found, skipping: {root}")
            elif not root_path.is_dir():
                self.warning(f"Not a directory, skipping: {root}")

        for excl_dir in getattr(args, "excluded_dirs", []) or []:
            if not Path(excl_dir).expanduser().is_dir():
                self.warning(f"Excluded directory not found: {excl_dir}")

    @staticmethod
    def resolve_roots(roots: List[str]) -> List[str]:
        if not roots:
            return default_roots()
        return [str(Path(root).expanduser().resolve()) for root in roots]

    def create_duplicate_params(self, args: argparse.Namespace) -> DuplicateScanParams:
        try:
            return DuplicateScanParams(
                roots=self.resolve_roots(args.roots),
                min_size_bytes=ConvertUtils.human_to_bytes(args.min_size),
                max_size_bytes=ConvertUtils.human_to_bytes(args.max_size) if args.max_size else None,
                extensions=args.extensions,
                excluded_names=list(args.excluded_names if args.excluded_names is not None
                                    else DEFAULT_EXCLUDED_NAMES),
                excluded_dirs=[str(Path(d).expanduser().resolve()) for d in args.excluded_dirs],
                partial_algorithm=args.partial_hash,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def create_large_params(self, args: argparse.Namespace) -> LargeFileScanParams:
        try:
            return LargeFileScanParams(
                roots=self.resolve_roots(args.roots),
                threshold_bytes=ConvertUtils.human_to_bytes(args.threshold),
                excluded_names=list(args.excluded_names if args.excluded_names is not None
                                    else DEFAULT_EXCLUDED_NAMES),
                excluded_dirs=[str(Path(d).expanduser().resolve()) for d in args.excluded_dirs],
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    # ---------------------------------------------------------------
    # Progress & cancellation
    # ---------------------------------------------------------------

    def progress_callback(self, label: str, fraction: float) -> None:
        """CLI progress callback for duplicate scans."""
        if not self.verbose:
            return
        sys.stderr.write(f"\r  [{fraction * 100:5.1f}%] {label[:60]:<60}")
        sys.stderr.flush()

    def label_callback(self, label: str) -> None:
        """CLI progress callback for large-file and usage scans."""
        if not self.verbose:
            return
        sys.stderr.write(f"\r  Scanning {label[:60]:<60}")
        sys.stderr.flush()

    @contextmanager
    def cancel_on_interrupt(self, command: ScanCommand):
        """Routes Ctrl+C to the command's cancellation token while a scan runs."""
        def _handler(signum, frame):
            self._cancelled = True
            command.cancel()

        try:
            previous = signal.signal(signal.SIGINT, _handler)
        except ValueError:
            # Not on the main thread: leave signal handling alone
            yield
            return
        try:
            yield
        finally:
            signal.signal(signal.SIGINT, previous)
            if self.verbose:
                sys.stderr.write("\n")

    # ---------------------------------------------------------------
    # Subcommands
    # ---------------------------------------------------------------

    def run_duplicates(self, args: argparse.Namespace) -> None:
        params = self.create_duplicate_params(args)
        if not self.quiet:
            print(f"Scanning for duplicates in: {', '.join(params.roots)}")

        command = DuplicateScanCommand(params)
        with self.cancel_on_interrupt(command):
            groups = command.scan(progress_callback=self.progress_callback)

        if self._cancelled:
            print("\nScan cancelled by user.", file=sys.stderr)
            sys.exit(130)

        if self.verbose:
            print(command.stats.print_summary())

        sort_order = GROUP_SORT_ALIASES[args.sort]
        groups = Sorter.sort_groups(groups, sort_order)
        if self.verbose:
            print(f"Sorted by: {sort_order.display_name}")

        if args.trash_duplicates:
            self.execute_trash_duplicates(command, groups, force=args.force)
        else:
            self.output_duplicates(groups)

    def output_duplicates(self, groups: List[DuplicateGroup]) -> None:
        if self.quiet:
            return

        if not groups:
            print("No duplicate groups found.")
            return

        total_files = sum(g.file_count for g in groups)
        reclaimable = sum(g.reclaimable_size for g in groups)
        print(f"\nFound {len(groups)} duplicate groups ({total_files} files), "
              f"{ConvertUtils.bytes_to_human(reclaimable)} reclaimable")

        for idx, group in enumerate(groups, 1):
            print(f"\nGroup {idx} | Size: {ConvertUtils.bytes_to_human(group.size)} "
                  f"| Copies: {group.file_count} "
                  f"| Reclaimable: {ConvertUtils.bytes_to_human(group.reclaimable_size)}")
            for file in group.files:
                marker = "[ORIG]" if file.is_original else "[DUP] "
                created = ConvertUtils.timestamp_to_human(file.created)
                print(f"   {marker} {file.path}  (created {created})")

    def execute_trash_duplicates(self, command: ScanCommand, groups: List[DuplicateGroup], force: bool = False) -> None:
        """Trash every non-original copy. Always shows preview before deletion."""
        if not groups:
            if not self.quiet:
                print("No duplicate groups found.")
            return

        selection = SelectionState.default_for(groups)
        files = selection.selected_files(groups)

        print()
        for idx, group in enumerate(groups, 1):
            print(f"Group {idx} | Size: {ConvertUtils.bytes_to_human(group.size)} | Copies: {group.file_count}")
            print("-" * 60)
            original = group.original
            print(f"   [KEEP] {original.path}")
            print(f"          Reason: oldest copy")
            for file in group.duplicates:
                print(f"   [DEL]  {file.path}")
            print()

        print("=" * 60)
        print(f"Summary: {len(groups)} files kept, {len(files)} files to trash, "
              f"{ConvertUtils.bytes_to_human(selection.selected_size(groups))} reclaimable")
        print()

        if not self.confirm(len(files), force):
            return

        self.report_trash(command.move_to_trash(files), len(files))

    def run_large(self, args: argparse.Namespace) -> None:
        params = self.create_large_params(args)
        if not self.quiet:
            print(f"Scanning for files of {ConvertUtils.bytes_to_human(params.threshold_bytes)} or more "
                  f"in: {', '.join(params.roots)}")

        command = LargeFileScanCommand(params)
        with self.cancel_on_interrupt(command):
            files = command.scan(progress_callback=self.label_callback)

        if self._cancelled and not self.quiet:
            print("\nScan cancelled by user, showing partial results.", file=sys.stderr)

        files = Sorter.sort_large_files(files, LARGE_SORT_ALIASES[args.sort])

        if args.trash:
            self.output_large_files(files)
            if files and self.confirm(len(files), args.force):
                self.report_trash(command.move_to_trash(files), len(files))
        else:
            self.output_large_files(files)

    def output_large_files(self, files: List[LargeFile]) -> None:
        if self.quiet:
            return
        if not files:
            print("No large files found.")
            return

        total = sum(f.size for f in files)
        print(f"\nFound {len(files)} large files, {ConvertUtils.bytes_to_human(total)} in total\n")
        for file in files:
            modified = ConvertUtils.timestamp_to_human(file.modified)
            print(f"   {ConvertUtils.bytes_to_human(file.size):>10}  {modified}  {file.category.display_name:<9}  {file.path}")

    def run_usage(self, args: argparse.Namespace) -> None:
        path = str(Path(args.path).expanduser())
        command = DiskUsageCommand(path)
        with self.cancel_on_interrupt(command):
            items = command.breakdown(progress_callback=self.label_callback)

        if not items and not DiskUsageCommand.is_path_available(path):
            self.error_exit(f"Cannot read directory: {path}")

        if self.quiet:
            return

        total = sum(item.size for item in items)
        print(f"\n{path}: {ConvertUtils.bytes_to_human(total)}\n")
        for item in items:
            kind = "dir " if item.is_directory else "file"
            print(f"   {ConvertUtils.bytes_to_human(item.size):>10}  {item.percentage:5.1f}%  {kind}  {item.name}")

        overview = storage_overview(path)
        if overview is not None:
            print(f"\nVolume: {ConvertUtils.bytes_to_human(overview.used)} used of "
                  f"{ConvertUtils.bytes_to_human(overview.total)} "
                  f"({ConvertUtils.bytes_to_human(overview.free)} free)")

    # ---------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------

    def confirm(self, count: int, force: bool) -> bool:
        if force:
            print("WARNING: --force flag skips confirmation. Proceeding...")
            return True

        if not sys.stdin.isatty() or not sys.stdout.isatty():
            self.error_exit(
                "Lost interactive terminal during operation. "
                "Use --force to proceed in non-interactive environments."
            )

        response = input(f"Are you sure you want to move {count} files to trash? [y/N]: ")
        if response.strip().lower() not in ("y", "yes"):
            print("Cancelled by user.")
            return False
        return True

    def report_trash(self, result: TrashResult, requested: int) -> None:
        if result.failed:
            print(f"\nPartial success: {result.success}/{requested} files moved to trash.")
            print(f"Failed to move {result.failed} file(s):")
            for path, error in result.errors[:5]:
                print(f"  • {os.path.basename(path)}: {error.split(':')[-1].strip()}")
            if result.failed > 5:
                print(f"  ...and {result.failed - 5} more files")
        else:
            print(f"Successfully moved {result.success} files to trash.")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"Warning: {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        logging.basicConfig(
            level=logging.DEBUG if args.debug else logging.ERROR,
            format=LOG_FORMAT
        )

        self.validate_args(args)

        if args.command == "duplicates":
            self.run_duplicates(args)
        elif args.command == "large":
            self.run_large(args)
        else:
            self.run_usage(args)

        if self.verbose:
            print(f"\nCompleted in {time.time() - self.start_time:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
