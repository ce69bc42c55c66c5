import re
from typing import Dict, NamedTuple, Optional

from .errors import InvalidPlaylist
from .utils import logger
from .variants import Variant


VIDEO_MARKER = "VIDEO="
BANDWIDTH_MARKER = "BANDWIDTH="
RESOLUTION_MARKER = "RESOLUTION="
SOURCE_TAG = "chunked"

_RANK_PREFIX = re.compile(r"[0-9]{3}")


# Attributes of a variant whose URI line has not been seen yet.
class PendingAttributes(NamedTuple):
    tag: str
    resolution: str
    bandwidth: str


# Value of a KEY= attribute, up to the next comma or the end of line.
# Missing attributes read as the empty string.
def attribute_value(line: str, marker: str) -> str:
    pos = line.find(marker)
    if pos < 0:
        return ""
    start = pos + len(marker)
    end = line.find(",", start)
    if end < 0:
        end = len(line)
    return line[start:end]


# Returns None for an empty tag, which leaves nothing pending.
def read_attributes(line: str) -> Optional[PendingAttributes]:
    pos = line.find(VIDEO_MARKER)
    # Unreachable from parse_playlist, which checks for the marker first.
    if pos < 0:
        raise InvalidPlaylist(f"no {VIDEO_MARKER} attribute in line: {line}")
    tag = line[pos + len(VIDEO_MARKER) :].replace('"', "").strip()
    if not tag:
        return None
    return PendingAttributes(
        tag=tag,
        resolution=attribute_value(line, RESOLUTION_MARKER),
        bandwidth=attribute_value(line, BANDWIDTH_MARKER),
    )


# Turns pending attributes plus the URI line following them into a
# Variant. Returns None (after logging a warning) for quality tags we
# don't understand, e.g. audio_only.
def make_variant(pending: PendingAttributes, link: str) -> Optional[Variant]:
    tag = pending.tag
    if tag == SOURCE_TAG:
        return Variant.source(link, pending.resolution, pending.bandwidth)
    prefix = tag[:3]
    if _RANK_PREFIX.fullmatch(prefix):
        return Variant.ranked(int(prefix), link, pending.resolution, pending.bandwidth)
    logger.warning(f"unknown quality: {tag}")
    return None


# Parses a master playlist into variants keyed by quality rank.
#
# The scanner is in one of two states: awaiting an attribute line
# (pending is None), or awaiting the URI line for the pending
# attributes. A new attribute line always replaces whatever is pending,
# so two attribute lines in a row silently drop the first set. A URI
# line with nothing pending is ignored.
#
# Later variants with the same rank overwrite earlier ones.
def parse_playlist(text: str) -> Dict[Optional[int], Variant]:
    variants = {}  # type: Dict[Optional[int], Variant]
    pending = None  # type: Optional[PendingAttributes]
    for line in text.splitlines():
        if VIDEO_MARKER in line:
            pending = read_attributes(line)
        line = line.strip()
        if pending is None or not line or line.startswith("#"):
            continue
        variant = make_variant(pending, line)
        pending = None
        if variant is not None:
            variants[variant.quality_rank] = variant
    return variants
