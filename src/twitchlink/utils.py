import logging
import os
import sys
from typing import cast

import appdirs


class Logger(logging.Logger):

    def exc_error(self, msg: str, exception: BaseException = None) -> None:
        self.error(self._format_exception_message(msg, exception))

    def exc_warning(self, msg: str, exception: BaseException = None) -> None:
        self.warning(self._format_exception_message(msg, exception))

    @staticmethod
    def _format_exception_message(lead_msg: str, exception: BaseException = None) -> str:
        if exception is None:
            exception = sys.exc_info()[1]
        if exception is None:
            return lead_msg
        exc_desc = f"{excname(exception)}: {exception}"
        if lead_msg:
            return f"{lead_msg}: {exc_desc}"
        else:
            return exc_desc


logging.setLoggerClass(Logger)
# We have to cast here due to logging.getLogger's stub being inflexible.
# https://github.com/python/typeshed/issues/1801
logger = cast(Logger, logging.getLogger("twitchlink"))
_fmt = logging.Formatter(fmt="[%(levelname)s] %(message)s")
_sh = logging.StreamHandler()
_sh.setFormatter(_fmt)
logger.addHandler(_sh)
logger.setLevel(logging.WARNING)

_dirs = appdirs.AppDirs("twitchlink", roaming=True)
USER_CONFIG_DIR = os.getenv("TWITCHLINK_USER_CONFIG_DIR") or _dirs.user_config_dir
USER_CONFIG_DISABLED = bool(os.getenv("TWITCHLINK_NO_USER_CONFIG"))


def increase_logging_verbosity(num_levels: int) -> None:
    target_level = logger.level - num_levels * 10
    target_level = min(max(target_level, logging.DEBUG), logging.CRITICAL)
    logger.setLevel(target_level)


# Returns the qualified name of an exception.
def excname(value: BaseException) -> str:
    etype = type(value)
    if etype.__module__ == "builtins":
        return etype.__name__
    else:
        return "%s.%s" % (etype.__module__, etype.__name__)


# Extracts the channel name from either a bare name or a channel URL,
# e.g. https://www.twitch.tv/somechannel/ becomes somechannel.
def channel_name(stream: str) -> str:
    stream = stream.strip().rstrip("/")
    if "/" in stream:
        return stream.split("/")[-1]
    return stream
