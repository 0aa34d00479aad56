###########EXTERNAL IMPORTS############

from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

#######################################

#############LOCAL IMPORTS#############

import util.functions.objects as objects

#######################################


@dataclass
class ServerOptions:
    """
    Deployment options of the monitoring server.

    Attributes:
        host (str): Bind address.
        port (int): Bind port.
        allowed_origins (List[str]): Origins allowed by the CORS policy ("*" allows any origin).
        feed_interval (float): Seconds between two live-feed pushes to the same subscriber.
        feed_event_name (str): Name of the event carrying each pushed snapshot.
        feed_path (str): WebSocket route of the live feed.
        provider_timeout (Optional[float]): Deadline in seconds for each telemetry query, None to disable.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    feed_interval: float = 5.0
    feed_event_name: str = "datosSistema"
    feed_path: str = "/ws"
    provider_timeout: Optional[float] = 10.0

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid PORT: {self.port}. Must be between 1 and 65535")
        if self.feed_interval <= 0:
            raise ValueError(f"Invalid FEED_INTERVAL_SECONDS: {self.feed_interval}. Must be greater than 0")
        if not self.feed_path.startswith("/"):
            raise ValueError(f"Invalid FEED_PATH: {self.feed_path}. Must start with '/'")
        if not self.allowed_origins:
            raise ValueError("ALLOWED_ORIGINS must contain at least one origin")


def load_server_options(config_file: Optional[str] = None) -> ServerOptions:
    """
    Loads the server options from a .env file and the process environment.

    Variables already present in the environment take precedence over the file.
    Unset variables keep their defaults.

    Args:
        config_file (Optional[str]): Path to the .env config file.

    Returns:
        ServerOptions: Validated server options.

    Raises:
        ValueError: If any numeric option is malformed or out of range.
    """

    if config_file is not None:
        load_dotenv(config_file)

    defaults = ServerOptions()
    timeout = float(objects.get_env_variable("PROVIDER_TIMEOUT_SECONDS", str(defaults.provider_timeout)))

    return ServerOptions(
        host=objects.get_env_variable("HOST", defaults.host),
        port=int(objects.get_env_variable("PORT", str(defaults.port))),
        allowed_origins=objects.split_csv(objects.get_env_variable("ALLOWED_ORIGINS", ",".join(defaults.allowed_origins))),
        feed_interval=float(objects.get_env_variable("FEED_INTERVAL_SECONDS", str(defaults.feed_interval))),
        feed_event_name=objects.get_env_variable("FEED_EVENT_NAME", defaults.feed_event_name),
        feed_path=objects.get_env_variable("FEED_PATH", defaults.feed_path),
        provider_timeout=timeout if timeout > 0 else None,
    )
