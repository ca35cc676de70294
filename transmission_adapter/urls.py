from typing import Union

from .config import Config


RPC_PATH = Config.TRANSMISSION_RPC_PATH


def build_url(host: str, port: Union[int, str], path: str = RPC_PATH) -> str:
    """Compose the daemon's RPC endpoint. Host and port are not validated."""
    return f"http://{host}:{port}{path}"
