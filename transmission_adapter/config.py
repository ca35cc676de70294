import os
import dotenv


dotenv.load_dotenv()


# Defaults
DEBUG = True
VERBOSE = False
LOG_PATH = "transmission_adapter.log"
LOG_LEVEL = "DEBUG" if DEBUG else "INFO"
LOG_ROTATION = "1 week"
LOG_RETENTION = "1 month"

# Transmission defaults
TRANSMISSION_HOST = "localhost"
TRANSMISSION_PORT = 9091
TRANSMISSION_USERNAME = ""
TRANSMISSION_PASSWORD = ""
TRANSMISSION_RPC_PATH = "/transmission/rpc"

# Timeouts (in seconds)
CONNECT_TIMEOUT = 5.0                  # Hard limit on the session handshake
REQUEST_TIMEOUT = 30.0                 # Transport default for every other call

# Polling intervals (in seconds)
POLL_INTERVAL = 5
POLL_IDLE_INTERVAL = 60                # Back-off after a failed poll

TRANSMISSION_FIELDS = [
    "id", "hashString", "name", "totalSize", "percentDone", "downloadedEver",
    "uploadedEver", "uploadRatio", "rateUpload", "rateDownload", "eta", "comment",
    "peersConnected", "maxConnectedPeers", "peersGettingFromUs", "peersSendingToUs",
    "queuePosition", "status", "addedDate", "doneDate", "downloadDir",
    "recheckProgress", "isFinished", "priorities", "trackers",
]


def _split_fields(value):
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    VERBOSE = str(os.getenv("VERBOSE", VERBOSE)).lower() == "true"

    LOG_PATH = os.getenv("LOG_PATH", LOG_PATH)
    LOG_LEVEL = os.getenv("LOG_LEVEL", LOG_LEVEL)
    LOG_ROTATION = os.getenv("LOG_ROTATION", LOG_ROTATION)
    LOG_RETENTION = os.getenv("LOG_RETENTION", LOG_RETENTION)

    # Transmission Configuration
    TRANSMISSION_HOST = os.getenv("TRANSMISSION_HOST", TRANSMISSION_HOST)
    TRANSMISSION_PORT = int(os.getenv("TRANSMISSION_PORT", TRANSMISSION_PORT))
    TRANSMISSION_USERNAME = os.getenv("TRANSMISSION_USERNAME", TRANSMISSION_USERNAME)
    TRANSMISSION_PASSWORD = os.getenv("TRANSMISSION_PASSWORD", TRANSMISSION_PASSWORD)
    TRANSMISSION_RPC_PATH = os.getenv("TRANSMISSION_RPC_PATH", TRANSMISSION_RPC_PATH)

    CONNECT_TIMEOUT = float(os.getenv("CONNECT_TIMEOUT", CONNECT_TIMEOUT))
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", REQUEST_TIMEOUT))

    POLL_INTERVAL = int(os.getenv("POLL_INTERVAL", POLL_INTERVAL))
    POLL_IDLE_INTERVAL = int(os.getenv("POLL_IDLE_INTERVAL", POLL_IDLE_INTERVAL))

    # Torrent fields requested on every poll
    TRANSMISSION_FIELDS = (
        _split_fields(os.environ["TRANSMISSION_FIELDS"])
        if os.getenv("TRANSMISSION_FIELDS")
        else list(TRANSMISSION_FIELDS)
    )
