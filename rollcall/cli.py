"""Console front end for the roll call service.

Reads one command per line and prints the result. All state lives in the
RollCallService; this module only parses commands and formats output.
"""

import argparse
import logging
from typing import List, Optional

from rollcall.models.config import RosterConfig
from rollcall.models.loader import ImportStats
from rollcall.models.roster import Entity
from rollcall.service.roll_call import RollCallService

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

HELP_TEXT = """Commands:
  add NAME, GROUP   Add an entity
  call [GROUP]      Call a random entity, optionally from one group
  history [N]       Show the N most recent calls (all if omitted or 0)
  stats             Show call counts
  groups            Show groups
  reset             Start a new cycle
  clear             Clear call history
  import PATH       Import NAME,GROUP lines from a file
  save / restore    Write or load the archive (needs --archive)
  status            Show roster and pool state
  help              Show this text
  exit              Quit"""


def _format_selected(entity: Entity) -> str:
    return f"Selected: {entity.identity} ({entity.group})"


def _format_stats(stats: ImportStats) -> str:
    return (
        f"Imported {stats.added} new, {stats.duplicates} duplicates, "
        f"{stats.malformed} malformed lines."
    )


def _print_statistics(service: RollCallService) -> None:
    entities = service.statistics()
    if not entities:
        print("No roster data")
        return
    print(f"{'Name':<20}{'Group':<15}Count")
    for entity in entities:
        print(f"{entity.identity:<20}{entity.group:<15}{entity.call_count}")


def _print_groups(service: RollCallService) -> None:
    groups = service.groups()
    if not groups:
        print("No group data")
        return
    print("Groups:")
    for summary in groups:
        print(f"- {summary.group} ({summary.size})")


def _print_history(service: RollCallService, limit: int) -> None:
    records = service.history(limit)
    if not records:
        print("No history yet")
        return
    for record in records:
        print(f"{record.timestamp.strftime(TIMESTAMP_FORMAT)} - {record.group} - {record.identity}")


def _print_status(service: RollCallService) -> None:
    status = service.status
    print(f"Entities: {status['entities']}  Groups: {status['groups']}  Calls: {status['calls']}")
    if not status["pools"]:
        print("No cycle in progress")
    for pool in status["pools"]:
        scope = pool["scope"] if pool["scope"] is not None else "(all)"
        print(f"- {scope}: {pool['remaining']} left this cycle")


def run_command(service: RollCallService, line: str) -> bool:
    """Execute one console command. Returns False when the session should end."""
    command, _, arg = line.strip().partition(" ")
    command, arg = command.lower(), arg.strip()

    if command in ("exit", "quit"):
        return False

    if command == "help":
        print(HELP_TEXT)
    elif command == "add":
        identity, sep, group = arg.partition(",")
        if not sep or not identity.strip() or not group.strip():
            print("Usage: add NAME, GROUP (name and group cannot be empty)")
        elif service.add_entity(identity, group):
            print("Entity added.")
        else:
            print("Entity already exists.")
    elif command == "call":
        entity = service.draw(arg or None)
        if entity:
            print(_format_selected(entity))
        elif arg:
            print("Group empty or unknown.")
        else:
            print("No entities available.")
    elif command == "history":
        try:
            limit = int(arg) if arg else 0
        except ValueError:
            limit = -1
        if limit < 0:
            print("History limit must be a non-negative number.")
            return True
        _print_history(service, limit)
    elif command == "stats":
        _print_statistics(service)
    elif command == "groups":
        _print_groups(service)
    elif command == "reset":
        service.reset_cycle()
        print("Cycle reset.")
    elif command == "clear":
        service.clear_history()
        print("History cleared.")
    elif command == "import":
        if not arg:
            print("Path cannot be empty.")
            return True
        stats = service.import_file(arg)
        print(_format_stats(stats) if stats is not None else "Failed to open file.")
    elif command in ("save", "restore"):
        if service.archive is None:
            print("No archive configured; start with --archive PATH.")
        elif command == "save":
            entities, records = service.save_archive()
            print(f"Saved {entities} entities and {records} calls.")
        else:
            entities, records = service.restore_archive()
            print(f"Restored {entities} entities and {records} calls.")
    elif command == "status":
        _print_status(service)
    elif command:
        print("Unknown command. Type 'help' for a list.")
    return True


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Roll call - fair random calling from a roster",
    )
    parser.add_argument(
        "--roster",
        default=None,
        metavar="PATH",
        help="Roster loaded at startup (default: $ROLLCALL_ROSTER or roster.csv)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Fixed random seed (default: $ROLLCALL_SEED or OS entropy)",
    )
    parser.add_argument(
        "--archive",
        default=None,
        metavar="DB",
        help="sqlite file used by the save and restore commands",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more detail (-v info, -vv debug)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Run the roll call console."""
    args = _parse_args(argv)

    level = logging.WARNING if args.verbose == 0 else (logging.INFO if args.verbose == 1 else logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    config = RosterConfig(
        seed=args.seed,
        default_roster_path=args.roster,
        archive_path=args.archive,
    )
    service = RollCallService(config=config)

    print("=== Roll Call ===")
    stats = service.load_default_roster()
    if stats is not None:
        print(f"Loaded default roster from {config.default_roster_path}. {_format_stats(stats)}")
    else:
        print("No default roster found. Use 'import PATH' to load one.")
    print("Type 'help' for commands, 'exit' to quit")

    while True:
        try:
            line = input("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not run_command(service, line):
            break

    print("Goodbye!")


if __name__ == "__main__":
    main()
