import http.server
import json
import os
import threading
import urllib.parse

import pytest

# Must be set before twitchlink.utils is imported anywhere.
os.environ["TWITCHLINK_NO_USER_CONFIG"] = "1"

CLIENT_ID = "test-client-id"

MASTER_PLAYLIST = """\
#EXTM3U
#EXT-X-TWITCH-INFO:NODE="video-edge-c2a4d4.sjc01",MANIFEST-NODE="video-weaver.sjc01",SERVER-TIME="1577836800.00",CLUSTER="sjc01",BROADCAST-ID="36431529920"
#EXT-X-MEDIA:TYPE=VIDEO,GROUP-ID="chunked",NAME="1080p (source)",AUTOSELECT=YES,DEFAULT=YES
#EXT-X-STREAM-INF:PROGRAM-ID=1,BANDWIDTH=6000000,RESOLUTION=1920x1080,CODECS="avc1.64002A,mp4a.40.2",VIDEO="chunked"
https://video-weaver.sjc01.hls.ttvnw.net/v1/playlist/source.m3u8
#EXT-X-MEDIA:TYPE=VIDEO,GROUP-ID="720p30",NAME="720p",AUTOSELECT=YES,DEFAULT=YES
#EXT-X-STREAM-INF:PROGRAM-ID=1,BANDWIDTH=3000000,RESOLUTION=1280x720,CODECS="avc1.4D401F,mp4a.40.2",VIDEO="720p30"
https://video-weaver.sjc01.hls.ttvnw.net/v1/playlist/720p.m3u8
#EXT-X-MEDIA:TYPE=VIDEO,GROUP-ID="480p30",NAME="480p",AUTOSELECT=YES,DEFAULT=YES
#EXT-X-STREAM-INF:PROGRAM-ID=1,BANDWIDTH=1500000,RESOLUTION=852x480,CODECS="avc1.4D401F,mp4a.40.2",VIDEO="480p30"
https://video-weaver.sjc01.hls.ttvnw.net/v1/playlist/480p.m3u8
#EXT-X-MEDIA:TYPE=VIDEO,GROUP-ID="audio_only",NAME="audio_only",AUTOSELECT=NO,DEFAULT=NO
#EXT-X-STREAM-INF:PROGRAM-ID=1,BANDWIDTH=160000,CODECS="mp4a.40.2",VIDEO="audio_only"
https://video-weaver.sjc01.hls.ttvnw.net/v1/playlist/audio_only.m3u8
"""

EMPTY_PLAYLIST = "#EXTM3U\n"

TOKENS = {
    "somechannel": {"token": '{"channel":"somechannel"}', "sig": "0123456789abcdef"},
    "emptychannel": {"token": '{"channel":"emptychannel"}', "sig": "fedcba9876543210"},
    "notoken": {"sig": "0123456789abcdef"},
    "nosig": {"token": '{"channel":"nosig"}', "sig": 42},
    "notanobject": ["token", "sig"],
    "offlinechannel": {"token": '{"channel":"offlinechannel"}', "sig": "0011223344556677"},
    "usherdown": {"token": '{"channel":"usherdown"}', "sig": "8899aabbccddeeff"},
}

PLAYLISTS = {
    "somechannel": MASTER_PLAYLIST,
    "emptychannel": EMPTY_PLAYLIST,
}


class TwitchRequestHandler(http.server.BaseHTTPRequestHandler):
    def do_GET(self):
        url = urllib.parse.urlsplit(self.path)
        self.server.requests.append((url.path, urllib.parse.parse_qsl(url.query), dict(self.headers)))
        segments = url.path.strip("/").split("/")
        if segments[:2] == ["api", "channels"] and segments[-1] == "access_token":
            self.handle_access_token(segments[2])
        elif segments[:3] == ["api", "channel", "hls"] and segments[-1].endswith(".m3u8"):
            self.handle_playlist(segments[3][: -len(".m3u8")])
        else:
            self.respond(404, "not found")

    def handle_access_token(self, channel):
        if self.headers.get("Client-ID") != CLIENT_ID:
            self.respond(400, json.dumps({"error": "Bad Request"}), "application/json")
        elif channel == "badjson":
            self.respond(200, "<html>not json</html>", "text/html")
        elif channel == "servererror":
            self.respond(500, "internal server error")
        elif channel in TOKENS:
            self.respond(200, json.dumps(TOKENS[channel]), "application/json")
        else:
            self.respond(404, json.dumps({"error": "Not Found"}), "application/json")

    def handle_playlist(self, channel):
        if channel == "usherdown":
            self.respond(503, "service unavailable")
        elif channel in PLAYLISTS:
            self.respond(200, PLAYLISTS[channel], "application/vnd.apple.mpegurl")
        else:
            self.respond(404, "[]", "application/json")

    def respond(self, status, body, content_type="text/plain"):
        data = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, *_):
        pass


class TwitchServer(http.server.HTTPServer):
    def __init__(self):
        super().__init__(("127.0.0.1", 0), TwitchRequestHandler)
        host, port = self.socket.getsockname()
        self.server_root = f"http://{host}:{port}"
        self.requests = []

    def __enter__(self):
        self._thread = threading.Thread(target=self.serve_forever, daemon=True)
        self._thread.start()
        return self

    def __exit__(self, *_):
        self.shutdown()
        self.server_close()
        self._thread.join()


@pytest.fixture(scope="session")
def twitch_server():
    with TwitchServer() as server:
        yield server


@pytest.fixture()
def requests_log(twitch_server):
    del twitch_server.requests[:]
    return twitch_server.requests


@pytest.fixture()
def patched_endpoints(twitch_server, monkeypatch):
    from twitchlink import api

    monkeypatch.setattr(api, "API_ROOT", twitch_server.server_root)
    monkeypatch.setattr(api, "USHER_ROOT", twitch_server.server_root)
    return twitch_server


@pytest.fixture(autouse=True)
def reset_logging_level():
    from twitchlink.utils import logger

    level = logger.level
    try:
        yield
    finally:
        logger.setLevel(level)


@pytest.fixture()
def unused_root():
    # Bind and immediately release a port so that nothing is listening.
    server = http.server.HTTPServer(("127.0.0.1", 0), http.server.BaseHTTPRequestHandler)
    host, port = server.socket.getsockname()
    server.server_close()
    return f"http://{host}:{port}"


@pytest.fixture()
def client_id():
    return CLIENT_ID


@pytest.fixture()
def master_playlist():
    return MASTER_PLAYLIST
