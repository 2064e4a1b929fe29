"""
hvscinfo - SID File Information Command-Line Interface
======================================================

This module implements the command-line interface for inspecting SID files
of the High Voltage SID Collection and the HVSC documents describing them.

Commands
--------
- **psid**: Show the PSID/RSID header of a SID file
- **stil**: Show the STIL entry of a SID file
- **sldb**: Show the song lengths of a SID file
- **bugs**: Show the BUGlist entry of a SID file
- **all**: Run all of the above

Usage Examples
--------------
Show a header:
    $ hvscinfo psid C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid

Show the STIL entry of tune 2 as JSON:
    $ hvscinfo -r C64Music stil --tune 2 --json C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid

Show the unparsed STIL entry:
    $ hvscinfo -r C64Music stil --raw C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid

Everything, with the HVSC root taken from the environment:
    $ export HVSC_BASE=C64Music
    $ hvscinfo all C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from hvsc_tools import __version__
from hvsc_tools.cli.errors import exit_code_for, handle_cli_exception
from hvsc_tools.config import HVSCConfig
from hvsc_tools.errors import HVSCError
from hvsc_tools.psid import PsidFile
from hvsc_tools.sldb import SongLengthDatabase
from hvsc_tools.stil import BugList, StilCatalog
from hvsc_tools.textfile import DEFAULT_ENCODING
from hvsc_tools.timestamp import format_seconds

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the HVSC installation and verbosity.
    """

    def __init__(self) -> None:
        self.config: HVSCConfig = HVSCConfig()
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


SID_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)
# STIL and BUGlist lookups only need the catalog key, not the file
SID_KEY = click.Path(dir_okay=False, path_type=Path)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-r", "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    envvar="HVSC_BASE",
    help="HVSC root directory (default: $HVSC_BASE or the current directory)",
)
@click.option(
    "--encoding",
    envvar="HVSC_ENCODING",
    default=DEFAULT_ENCODING,
    show_default=True,
    help="Text encoding of the HVSC documents",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(__version__, "--version", "-V", prog_name="hvscinfo")
@pass_context
def main(ctx: Context, root: Optional[Path], encoding: str, verbose: bool) -> None:
    """
    Inspect SID files of the High Voltage SID Collection.

    \b
    Commands:
      psid   Show the PSID/RSID header
      stil   Show the STIL entry
      sldb   Show the song lengths
      bugs   Show the BUGlist entry
      all    Run all of the above

    \b
    Examples:
      hvscinfo psid Commando.sid
      hvscinfo -r C64Music stil --tune 2 C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid
      hvscinfo -r C64Music all C64Music/MUSICIANS/H/Hubbard_Rob/Commando.sid
    """
    ctx.verbose = verbose
    ctx.setup_logging()
    ctx.config = HVSCConfig(root=root if root is not None else Path.cwd(), encoding=encoding)
    logger.debug(f"HVSC root: {ctx.config.root}")


# =============================================================================
# Reports
# =============================================================================

def show_psid(path: Path, as_json: bool = False, program: Optional[Path] = None) -> None:
    """Print the header of a SID file, optionally extracting its program."""
    sid = PsidFile.from_file(path)
    if as_json:
        click.echo(json.dumps(sid.get_info(), indent=2))
    else:
        click.echo(sid.to_text())

    if program is not None:
        size = sid.write_program(program)
        click.echo(f"Wrote {size} bytes to {program}")


def show_stil(
    config: HVSCConfig,
    path: Path,
    tune: Optional[int] = None,
    raw: bool = False,
    as_json: bool = False,
) -> None:
    """
    Print the STIL entry of a SID file.

    A missing entry is reported, not treated as an error.
    """
    key = config.path_to_key(path)
    catalog = StilCatalog.from_config(config)

    if raw:
        lines = catalog.read_raw(key)
        if lines is None:
            click.echo(f"No STIL entry for {key}")
            return
        click.echo(key)
        for line in lines:
            click.echo(line.text)
        return

    entry = catalog.find(key)
    if entry is None:
        click.echo(f"No STIL entry for {key}")
        return

    if tune is None:
        if as_json:
            click.echo(json.dumps(entry.to_dict(), indent=2))
        else:
            click.echo(entry.to_text())
        return

    fields = entry.get_tune_fields(tune)
    if as_json:
        click.echo(json.dumps({
            "key": key,
            "tune": tune,
            "fields": [item.to_dict() for item in fields],
        }, indent=2))
        return

    if not fields:
        click.echo(f"No STIL info for tune {tune} of {key}")
        return
    click.echo(f"{{File: {key}}} {{#{tune}}}")
    for item in fields:
        click.echo(f"  {item.kind.display} {item.text}")
        if item.timestamp is not None and item.timestamp.is_present:
            click.echo(f"    {{timestamp}} {item.timestamp}")


def show_song_lengths(config: HVSCConfig, path: Path, as_json: bool = False) -> None:
    """Print the song lengths of a SID file."""
    record = SongLengthDatabase.from_config(config).get_lengths(path)
    if as_json:
        click.echo(json.dumps({"key": record.key, "durations": record.durations}, indent=2))
        return

    click.echo(f"{path}: {len(record.durations)} song(s)")
    for song, seconds in enumerate(record.durations, start=1):
        click.echo(f"  #{song:<3} {format_seconds(seconds)}")


def show_bugs(config: HVSCConfig, path: Path) -> None:
    """
    Print the BUGlist entry of a SID file.

    Most SID files have no entry; that is reported, not treated as an error.
    """
    key = config.path_to_key(path)
    bugs = BugList.from_config(config).find_bugs(key)
    if bugs is None:
        click.echo(f"No BUGlist entry for {key}")
        return
    click.echo(bugs.to_text())


# =============================================================================
# PSID Command
# =============================================================================

@main.command("psid")
@click.argument("file", type=SID_FILE)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--write-prg",
    "program",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the C64 program to this PRG file",
)
@pass_context
def psid_cmd(ctx: Context, file: Path, as_json: bool, program: Optional[Path]) -> None:
    """
    Show the PSID/RSID header of FILE.

    \b
    Example:
      hvscinfo psid Commando.sid
    """
    try:
        show_psid(file, as_json=as_json, program=program)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "PSID")


# =============================================================================
# STIL Command
# =============================================================================

@main.command("stil")
@click.argument("file", type=SID_KEY)
@click.option(
    "-t", "--tune",
    type=click.IntRange(min=1),
    help="Only show the info of this tune",
)
@click.option("--raw", is_flag=True, help="Show the entry text without parsing it")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_context
def stil_cmd(ctx: Context, file: Path, tune: Optional[int], raw: bool, as_json: bool) -> None:
    """
    Show the STIL entry of FILE.

    \b
    Examples:
      hvscinfo -r C64Music stil C64Music/DEMOS/A-F/Afterburner.sid
      hvscinfo -r C64Music stil --tune 3 C64Music/DEMOS/A-F/Afterburner.sid
    """
    try:
        show_stil(ctx.config, file, tune=tune, raw=raw, as_json=as_json)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "STIL")


# =============================================================================
# SLDB Command
# =============================================================================

@main.command("sldb")
@click.argument("file", type=SID_FILE)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_context
def sldb_cmd(ctx: Context, file: Path, as_json: bool) -> None:
    """
    Show the song lengths of FILE.

    The SID file is looked up by its MD5 fingerprint.
    """
    try:
        show_song_lengths(ctx.config, file, as_json=as_json)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "Song length")


# =============================================================================
# Bugs Command
# =============================================================================

@main.command("bugs")
@click.argument("file", type=SID_KEY)
@pass_context
def bugs_cmd(ctx: Context, file: Path) -> None:
    """Show the BUGlist entry of FILE."""
    try:
        show_bugs(ctx.config, file)
    except Exception as e:
        handle_cli_exception(e, ctx.verbose, "BUGlist")


# =============================================================================
# All Command
# =============================================================================

@main.command("all")
@click.argument("file", type=SID_FILE)
@pass_context
def all_cmd(ctx: Context, file: Path) -> None:
    """
    Show everything known about FILE.

    Every report runs even when an earlier one fails; the exit code is
    that of the first failure.
    """
    reports = (
        ("PSID", lambda: show_psid(file)),
        ("STIL", lambda: show_stil(ctx.config, file)),
        ("Song length", lambda: show_song_lengths(ctx.config, file)),
        ("BUGlist", lambda: show_bugs(ctx.config, file)),
    )

    failure: Optional[tuple[str, Exception]] = None
    for title, report in reports:
        click.echo(f"=== {title} ===")
        try:
            report()
        except HVSCError as e:
            click.echo(f"{title} error: {e}", err=True)
            if failure is None:
                failure = (title, e)
        except Exception as e:
            handle_cli_exception(e, ctx.verbose, title)
        click.echo()

    if failure is not None:
        title, error = failure
        logger.debug(f"First failure in {title}: {error}")
        sys.exit(exit_code_for(error))


if __name__ == "__main__":
    main()
