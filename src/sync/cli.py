"""CLI for running and inspecting source synchronization."""

import argparse
import sys

from common.env import env
from common.logger import error, progress, setup_logging, success, warning
from connectors.registry import create_connector
from store.checkpoint_store import DatabaseCheckpointStore
from store.db import DatabaseAdapter, DatabaseConfig, DatabaseError, create_database, get_adapter
from store.index_store import DatabaseApplier
from sync.checkpoint import TraversalCheckpoint
from sync.errors import CheckpointError, ConfigurationError, SyncError
from sync.reconciliation import ReconciliationEngine
from sync.runner import TraversalRunner


def _open_database(args) -> DatabaseAdapter:
    """Connect to the database from --database or the environment."""
    try:
        if getattr(args, "database", None):
            adapter = create_database(DatabaseConfig(db_type="sqlite", db_path=args.database))
        else:
            adapter = get_adapter()
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    adapter.connect()
    adapter.create_schema()
    return adapter


def cmd_run(args) -> int:
    """Poll the source until the cycle/poll limits are reached."""
    connector = create_connector(args.source)
    adapter = _open_database(args)
    try:
        engine = ReconciliationEngine(
            name=connector.name,
            enumerator=connector.enumerator,
            builder=connector.builder,
            applier=DatabaseApplier(adapter),
            checkpoints=DatabaseCheckpointStore(adapter),
            max_workers=args.workers,
        )
        runner = TraversalRunner(
            engine,
            poll_interval=args.interval,
            quota_backoff=env.quota_backoff(),
        )
        summary = runner.run(max_cycles=args.cycles, max_polls=args.polls)
    finally:
        adapter.close()

    success(
        f"{summary.polls} poll(s), {summary.cycles} cycle(s): "
        f"{summary.accepted} accepted, {summary.deleted} deleted, "
        f"{summary.failed_items} failed, {summary.retries} retried"
    )
    return 1 if summary.failed_items and args.strict else 0


def cmd_status(args) -> int:
    """Show the traversal state of a source and the stored item counts."""
    adapter = _open_database(args)
    try:
        state = DatabaseCheckpointStore(adapter).load(args.source)
        counts = DatabaseApplier(adapter).count_by_status()
    finally:
        adapter.close()

    progress(f"Source: {args.source}")
    progress(f"  Cycle: {state.active_cycle()} ({'in progress' if state.in_progress else 'idle'})")
    if state.checkpoint is not None:
        remaining = TraversalCheckpoint.from_bytes(state.checkpoint).remaining_units
        progress(f"  Remaining units: {len(remaining)}")
        for unit in remaining:
            progress(f"    {unit}")
    if state.updated_at:
        progress(f"  Last poll: {state.updated_at.isoformat(timespec='seconds')}")

    total = sum(counts.values())
    progress(f"Items: {total}")
    for status, count in counts.items():
        progress(f"  {status}: {count}")
    return 0


def cmd_reset(args) -> int:
    """Discard the saved checkpoint so the next poll starts a new cycle."""
    adapter = _open_database(args)
    try:
        DatabaseCheckpointStore(adapter).clear(args.source)
    finally:
        adapter.close()
    success(f"Checkpoint cleared for {args.source}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Incrementally synchronize a source into the document store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-file", help="Also write log records to this file")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--source",
        "-s",
        default=env.sync_source(),
        help="Source to synchronize: github or sample (default: SYNC_SOURCE)",
    )
    common.add_argument(
        "--database",
        "-d",
        help="SQLite database path (default: DATABASE_TYPE / DATABASE_PATH settings)",
    )

    run_parser = subparsers.add_parser(
        "run",
        parents=[common],
        help="Poll the source and apply changes",
        description=(
            "Poll the source and apply changes.\n\n"
            "Without --cycles or --polls the command runs until interrupted."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_parser.add_argument("--cycles", type=int, help="Stop after this many complete cycles")
    run_parser.add_argument("--polls", type=int, help="Stop after this many polls")
    run_parser.add_argument(
        "--interval",
        type=float,
        default=env.poll_interval(),
        help="Seconds between cycles and after transient errors (default: SYNC_POLL_INTERVAL)",
    )
    run_parser.add_argument(
        "--workers",
        type=int,
        default=env.max_workers(),
        help="Threads used to build documents (default: SYNC_MAX_WORKERS)",
    )
    run_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero if any item failed",
    )

    subparsers.add_parser("status", parents=[common], help="Show traversal state and item counts")
    subparsers.add_parser("reset", parents=[common], help="Clear the saved checkpoint")

    return parser


COMMANDS = {
    "run": cmd_run,
    "status": cmd_status,
    "reset": cmd_reset,
}


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the sync CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(log_file=args.log_file)

    try:
        code = COMMANDS[args.command](args)
    except CheckpointError as e:
        error(f"Saved checkpoint is unreadable: {e}")
        warning(f"Run 'repo-sync reset --source {args.source}' to start a new cycle")
        sys.exit(1)
    except (SyncError, DatabaseError) as e:
        error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        warning("Interrupted")
        sys.exit(130)

    sys.exit(code)


if __name__ == "__main__":
    main()
