"""KNX Telegram Codec — Main Entry Point.

Loads settings from config.yaml, creates the telegram inspector and runs the
FastAPI codec API (decode/encode/history) on port 9090.

The codec itself (knxtp.Telegram) does no I/O; this process only wraps it
in an HTTP surface for tooling and debugging.
"""

import logging
import os
import signal
import threading

import yaml

from knxtp import Priority
from knxtp.addresses import parse_individual_address

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_CONFIG = {
    "service": {
        "host": "0.0.0.0",
        "port": 9090,
        "history_size": 1000,
    },
    "defaults": {
        "source_address": "1.1.255",
        "priority": "normal",
        "routing_counter": 6,
    },
}


def load_config(path: str) -> dict:
    """Load config.yaml and fill in anything it leaves out.

    A missing file yields the built-in defaults. Raises ValueError when a
    default address, priority or routing counter is unusable.
    """
    data = {}
    if os.path.exists(path):
        with open(path) as f:
            data = yaml.safe_load(f) or {}

    config = {}
    for section, values in DEFAULT_CONFIG.items():
        config[section] = {**values, **(data.get(section) or {})}

    defaults = config["defaults"]
    parse_individual_address(str(defaults["source_address"]))
    if str(defaults["priority"]).upper() not in Priority.__members__:
        raise ValueError(f"Unknown default priority: {defaults['priority']}")
    if not 0 <= int(defaults["routing_counter"]) <= 7:
        raise ValueError(f"Routing counter out of range: {defaults['routing_counter']}")
    return config


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main():
    logging.basicConfig(
        level=os.environ.get("KNXCODEC_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("knxcodec")

    # Late imports keep config errors ahead of FastAPI startup
    from api.app import create_app
    from core.telegram_inspector import TelegramInspector

    config_path = os.environ.get(
        "KNXCODEC_CONFIG", os.path.join(os.path.dirname(__file__), "config.yaml")
    )
    logger.info("Loading config from %s", config_path)
    config = load_config(config_path)

    service = config["service"]
    telegram_inspector = TelegramInspector(max_size=int(service["history_size"]))
    app = create_app(telegram_inspector=telegram_inspector, defaults=config["defaults"])

    # Start uvicorn in a background thread
    api_port = int(os.environ.get("KNXCODEC_API_PORT", service["port"]))
    _start_api_server(app, service["host"], api_port, logger)

    logger.info("KNX telegram codec started")
    logger.info("  Codec API: http://%s:%d", service["host"], api_port)
    logger.info("  Health: http://%s:%d/api/v1/health", service["host"], api_port)

    # Wait for shutdown signal
    shutdown = threading.Event()

    def handle_signal(signum, frame):
        logger.info("Received signal %d — shutting down", signum)
        shutdown.set()

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)

    shutdown.wait()
    logger.info("Shutdown complete")


def _start_api_server(app, host: str, port: int, logger):
    """Start uvicorn in a daemon thread."""
    import uvicorn

    config = uvicorn.Config(
        app=app,
        host=host,
        port=port,
        log_level="info",
        access_log=False,
    )
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, name="uvicorn", daemon=True)
    thread.start()
    logger.info("Uvicorn started on port %d (daemon thread)", port)
    return thread


if __name__ == "__main__":
    main()
