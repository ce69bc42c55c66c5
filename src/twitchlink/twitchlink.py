#!/usr/bin/env python3

import argparse
import json
import os
import pathlib
import sys
from typing import List, Sequence

import click

from . import api
from .errors import TwitchlinkError
from .player import default_player, launch_player
from .utils import (
    USER_CONFIG_DIR,
    USER_CONFIG_DISABLED,
    channel_name,
    increase_logging_verbosity,
    logger,
)
from .variants import DisplayItem, QualityPolicy, Variant, select_variant
from .version import __version__


USER_CONFIG_FILE = pathlib.Path(USER_CONFIG_DIR).joinpath("twitchlink.conf")


ADDITIONAL_HELP_TEXT = f"""
environment variables:
  TWITCH_CLIENT_ID      Twitch client ID used to request access tokens
                        (overridden by --client-id)
  TWITCHLINK_PLAYER     default media player (overridden by --player)
  TWITCHLINK_USER_CONFIG_DIR
                        custom directory for twitchlink.conf
  TWITCHLINK_NO_USER_CONFIG
                        when set to a non-empty value, do not load
                        options from user config file

configuration file:
  {USER_CONFIG_FILE}

"""


class ArgumentParser(argparse.ArgumentParser):
    # Set while parsing with options from the user config file prepended,
    # so that errors can point at the file.
    config_file_in_use = False

    def format_help(self) -> str:
        return super().format_help() + ADDITIONAL_HELP_TEXT

    def error(self, message):
        self.print_usage(sys.stderr)
        hint = ""
        if self.config_file_in_use:
            hint = f'check "{USER_CONFIG_FILE}" for invalid options\n'
        self.exit(2, f"{self.prog}: error: {message}\n{hint}")

    def parse_with_defaults(self, defaults: List[str]) -> argparse.Namespace:
        self.config_file_in_use = True
        try:
            return self.parse_args(defaults + sys.argv[1:])
        finally:
            self.config_file_in_use = False


CONFIG_FILE_TEMPLATE = """\
# Default options for twitchlink, one per line, e.g.
#
#     --client-id abcdefghijklmnopqrstuvwxyz0123
#     --player /usr/local/bin/mpv
#     --quality 720p
#
# An option's argument is taken verbatim up to the end of the line, so
# paths with spaces need no quoting. The channel itself cannot be set
# here. Options given on the command line win.
"""


# Reads default options from the user config file, writing the template
# there first if the file does not exist yet.
def load_user_config() -> List[str]:
    path = USER_CONFIG_FILE
    try:
        if not path.is_file():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(CONFIG_FILE_TEMPLATE, encoding="utf-8")
            return []
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        logger.exc_warning("error loading user config")
        return []
    except UnicodeDecodeError:
        logger.warning(f'cannot decode config file "{path}" as utf-8')
        return []

    options = []  # type: List[str]
    for line in map(str.strip, lines):
        if not line or line.startswith("#"):
            continue
        if line.startswith("-"):
            options.extend(line.split(maxsplit=1))
        else:
            logger.warning(f'ignoring non-option line in "{path}": {line}')
    return options


def _dumps(obj) -> str:
    return json.dumps(obj, ensure_ascii=False)


# Writes the requested listing to stdout. With singular set (a quality
# was explicitly requested) only the selected variant is shown.
def print_variants(
    variants: Sequence[Variant],
    selected: Variant,
    *,
    as_json: bool = False,
    display: bool = True,
    singular: bool = False,
) -> None:
    shown = [selected] if singular else list(variants)
    if not display:
        if singular:
            click.echo(_dumps(selected.to_json()))
        else:
            click.echo(_dumps([v.to_json() for v in shown]))
        return

    items = [DisplayItem.from_variant(v) for v in shown]
    if as_json:
        if singular:
            click.echo(_dumps(items[0].to_json()))
        else:
            click.echo(_dumps([item.to_json() for item in items]))
    else:
        for item in items:
            click.echo(str(item))


def main() -> int:
    user_config_options = [] if USER_CONFIG_DISABLED else load_user_config()

    parser = ArgumentParser(
        prog="twitchlink",
        description="Resolve the direct media URL of a live Twitch stream.",
    )
    add = parser.add_argument
    add("stream", help="the channel name or channel URL")
    add(
        "-q",
        "--quality",
        type=QualityPolicy.parse,
        default=None,
        help="""desired quality of the stream: best (or highest), worst
        (or lowest), or a label like 720p (default is best)""",
    )
    add(
        "-l",
        "--list",
        action="store_true",
        help="list stream quality information instead of playing",
    )
    add(
        "-j",
        "--json",
        action="store_true",
        help="dump the stream information as JSON instead of playing",
    )
    add(
        "-p",
        "--player",
        default=None,
        help="""the player to use (default is $TWITCHLINK_PLAYER, or mpv
        if unset)""",
    )
    add(
        "--client-id",
        default=None,
        help="Twitch client ID (default is $TWITCH_CLIENT_ID)",
    )
    add(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase logging verbosity (can be specified multiple times)",
    )
    add(
        "--quiet",
        action="count",
        default=0,
        help="decrease logging verbosity (can be specified multiple times)",
    )
    add(
        "--debug",
        action="store_true",
        help="output debugging information (also implies highest verbosity)",
    )
    add("-V", "--version", action="version", version=__version__)

    # First make sure arguments on the command line are valid.
    args = parser.parse_args()

    if not USER_CONFIG_DISABLED:
        # Prepend defaults from user config and parse again. If parsing
        # fails this time, the error must be in the config file.
        args = parser.parse_with_defaults(user_config_options)

    increase_logging_verbosity(args.verbose - args.quiet)
    if args.debug:
        increase_logging_verbosity(5)

    client_id = args.client_id or os.getenv("TWITCH_CLIENT_ID")
    if not client_id:
        logger.critical(
            "the environment variable 'TWITCH_CLIENT_ID' must be set to "
            "your Twitch client ID (or pass --client-id)"
        )
        return 1

    channel = channel_name(args.stream)
    if not channel:
        logger.critical(f"cannot determine a channel name from {args.stream}")
        return 1

    singular = args.quality is not None
    policy = args.quality or QualityPolicy.best()

    try:
        variants = api.get_variants(client_id, channel)
        selected = select_variant(variants, policy, channel=channel)
        if args.list or args.json:
            print_variants(
                variants,
                selected,
                as_json=args.json,
                display=args.list,
                singular=singular,
            )
        else:
            launch_player(args.player or default_player(), selected.link)
    except TwitchlinkError as e:
        logger.critical(str(e), exc_info=args.debug)
        return 1
    except KeyboardInterrupt:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
