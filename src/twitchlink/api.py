import urllib.parse
from typing import Any, List, Tuple

import requests

from .errors import (
    DeserializeError,
    MissingSignature,
    MissingToken,
    StreamOffline,
    TransportError,
)
from .playlist import parse_playlist
from .utils import logger
from .variants import QualityPolicy, Variant, order_variants, select_variant


API_ROOT = "https://api.twitch.tv"
USHER_ROOT = "https://usher.ttvnw.net"

# Fixed query parameters expected by the usher endpoint alongside the
# token and signature.
PLAYLIST_PARAMS = (
    ("player_backend", "html5"),
    ("player", "twitchweb"),
    ("type", "any"),
    ("allow_source", "true"),
)


def _send(session: Any, url: str, what: str, **kwargs: Any) -> requests.Response:
    logger.debug(f"GET {url}")
    try:
        return session.get(url, **kwargs)
    except requests.RequestException as e:
        raise TransportError(f"cannot get {what} because: {e}") from e


def _check_status(r: requests.Response, what: str) -> None:
    if not 200 <= r.status_code < 300:
        raise TransportError(f"cannot get {what} because: GET {r.url}: HTTP {r.status_code}")


# Exchanges a channel name for a short-lived (token, signature) pair.
#
# session may be the requests module itself (default) or a
# requests.Session; anything with a compatible get() works.
def exchange_token(
    client_id: str,
    channel: str,
    *,
    session: Any = requests,
    api_root: str = None,
    timeout: float = None,
) -> Tuple[str, str]:
    url = "{}/api/channels/{}/access_token".format(
        api_root or API_ROOT, urllib.parse.quote(channel, safe="")
    )
    r = _send(session, url, "access token", headers={"Client-ID": client_id}, timeout=timeout)
    _check_status(r, "access token")
    try:
        val = r.json()
    except ValueError as e:
        raise DeserializeError(f"cannot deserialize response because: {e}") from e

    if not isinstance(val, dict):
        raise MissingToken()
    token = val.get("token")
    sig = val.get("sig")
    if not isinstance(token, str):
        raise MissingToken()
    if not isinstance(sig, str):
        raise MissingSignature()
    return token, sig


# Fetches the master playlist for channel as text.
def fetch_playlist(
    token: str,
    sig: str,
    channel: str,
    *,
    session: Any = requests,
    usher_root: str = None,
    timeout: float = None,
) -> str:
    url = "{}/api/channel/hls/{}.m3u8".format(
        usher_root or USHER_ROOT, urllib.parse.quote(channel, safe="")
    )
    params = [("token", token), ("sig", sig)]
    params.extend(PLAYLIST_PARAMS)
    # Without stream=True the body has already been read (or the read
    # error raised) by the time _send returns.
    r = _send(session, url, "playlist", params=params, timeout=timeout)
    # usher answers 404 for channels that are not live.
    if r.status_code == 404:
        raise StreamOffline(channel)
    _check_status(r, "playlist")
    return r.text


# Runs the whole discovery pipeline and returns the variants ordered
# from best to worst. An empty list means the channel is not live (or
# has no playable variants).
def get_variants(
    client_id: str,
    channel: str,
    *,
    session: Any = requests,
    api_root: str = None,
    usher_root: str = None,
    timeout: float = None,
) -> List[Variant]:
    token, sig = exchange_token(
        client_id, channel, session=session, api_root=api_root, timeout=timeout
    )
    playlist = fetch_playlist(
        token, sig, channel, session=session, usher_root=usher_root, timeout=timeout
    )
    return order_variants(parse_playlist(playlist))


def resolve(
    client_id: str, channel: str, policy: QualityPolicy, **kwargs: Any
) -> Variant:
    return select_variant(get_variants(client_id, channel, **kwargs), policy, channel=channel)
