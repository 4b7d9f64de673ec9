import logging
import signal
import sys
from typing import Optional, Sequence

from app_config import AppConfigurationError, load_app_config, resolve_config_path
from runtime import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from server import ServerConfigurationError, UIServer, UIServerConfig


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    return logging.getLogger("runtime")


def setup_signal_handlers(engine: RuntimeEngine) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        engine.request_shutdown(f"{signal.Signals(signum).name} received")

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the pomodoro session service with its web UI."""
    args = list(sys.argv[1:] if argv is None else argv)
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path(args[0] if args else None)
        app_config = load_app_config(str(config_path))
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logger = setup_logging(level=app_config.logging.level)
    logger.info("Loaded runtime config: %s", config_path)

    ui_server: Optional[UIServer] = None
    try:
        ui_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        return 1

    if ui_config.enabled:
        ui_server = UIServer(config=ui_config, logger=logging.getLogger("ui_server"))
    else:
        logger.info("UI server disabled by configuration")

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logger,
            app_config=app_config,
            ui_server=ui_server,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
        )
    )
    return engine.run()


if __name__ == "__main__":
    sys.exit(main())
