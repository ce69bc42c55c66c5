from .api import exchange_token, fetch_playlist, get_variants, resolve
from .errors import TwitchlinkError
from .playlist import parse_playlist
from .variants import DisplayItem, QualityPolicy, Variant, order_variants, select_variant
from .version import __version__
