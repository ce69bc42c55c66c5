class TwitchlinkError(Exception):
    pass


# Network or I/O failure when talking to either endpoint. The original
# requests exception is chained as __cause__.
class TransportError(TwitchlinkError):
    pass


class DeserializeError(TwitchlinkError):
    pass


class MissingToken(TwitchlinkError):
    def __init__(self):
        super().__init__("cannot find token")


class MissingSignature(TwitchlinkError):
    def __init__(self):
        super().__init__("cannot find signature")


class InvalidPlaylist(TwitchlinkError):
    pass


class StreamOffline(TwitchlinkError):
    def __init__(self, channel: str = None):
        self.channel = channel
        if channel:
            super().__init__(f"stream `{channel}` is offline")
        else:
            super().__init__("stream is offline")


class QualityUnavailable(TwitchlinkError):
    def __init__(self, label: str, channel: str = None):
        self.label = label
        self.channel = channel
        if channel:
            super().__init__(f"quality `{label}` is not available for stream `{channel}`")
        else:
            super().__init__(f"quality `{label}` is not available")


class PlayerNotFound(TwitchlinkError):
    def __init__(self, player: str):
        self.player = player
        super().__init__(
            f"invalid player: {player}; set TWITCHLINK_PLAYER "
            f"or provide a path to a valid executable"
        )


class PlayerLaunchError(TwitchlinkError):
    pass
