import os
import shutil
import subprocess

from .errors import PlayerLaunchError, PlayerNotFound
from .utils import logger


def default_player() -> str:
    return os.getenv("TWITCHLINK_PLAYER") or ("mpv" if os.name == "nt" else "/usr/bin/mpv")


# Spawns player on link and returns immediately; the player outlives
# us if it wants to.
def launch_player(player: str, link: str) -> subprocess.Popen:
    executable = shutil.which(player)
    if executable is None:
        raise PlayerNotFound(player)
    logger.info(f"launching {executable} {link}")
    try:
        return subprocess.Popen([executable, link])
    except OSError as e:
        raise PlayerLaunchError(
            f"cannot start player; make sure `{player}` is a valid player: {e}"
        ) from e
