#!/usr/bin/env python3
"""
SMHI Wind - Main Application
Shows current wind speed and direction on a smart-mirror dashboard
"""

import argparse
import logging
import signal
import sys
import time
from logging.handlers import RotatingFileHandler

from .config import Config
from .display_manager import DisplayManager, render_html
from .mqtt_bridge import MQTTBridge
from .notifications import NotificationChannel, WindHelper
from .presenter import WindPresenter
from .smhi_client import SMHIClient


def setup_logging(config):
    """Setup logging configuration"""
    log_level = getattr(logging, str(config.logging_level).upper(), logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)
    handlers = [console_handler]

    log_file = config.data.get('logging', {}).get('file')
    if log_file:
        try:
            max_bytes = config.data.get('logging', {}).get('max_size_mb', 10) * 1024 * 1024
            backup_count = config.data.get('logging', {}).get('backup_count', 3)

            file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(console_formatter)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Warning: Could not setup file logging: {e}")

    # basicConfig is a no-op once logging is initialized
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    for handler in handlers:
        root_logger.addHandler(handler)


class WindApp:
    """Wires the fetcher, presenter and outputs together"""

    def __init__(self, config: Config, client: SMHIClient = None, threaded: bool = True):
        self.config = config
        self.channel = NotificationChannel()
        self.client = client or SMHIClient.from_config(config)
        self.helper = WindHelper(self.client, self.channel, threaded=threaded)
        self.presenter = WindPresenter(config, self.channel)
        self.display = DisplayManager(config)
        self.presenter.add_listener(self.display.show)

        self.bridge = None
        if config.mqtt_enabled:
            self.bridge = MQTTBridge(config, self.channel)
            self.presenter.add_listener(self.bridge.publish_fragment)

        self.running = False

    def start(self):
        logging.info("Starting application components...")
        self.running = True

        if self.bridge:
            self.bridge.start()

        # Initial placeholder until the first report arrives
        self.display.show(self.presenter.render())
        self.presenter.start()
        logging.info(
            f"Wind module running for lat={self.config.lat}, lon={self.config.lon} "
            f"every {self.config.update_interval_sec:.0f}s"
        )

    def run_forever(self):
        self.start()
        while self.running:
            time.sleep(1)

    def shutdown(self):
        if not self.running:
            return

        logging.info("Shutting down application...")
        self.running = False
        self.presenter.stop()

        if self.bridge:
            self.bridge.stop()

        logging.info("Application shutdown complete")


def parse_args(argv=None):
    p = argparse.ArgumentParser("smhi-wind")
    p.add_argument("--config", default="config.yaml", help="Path to YAML configuration")
    p.add_argument("--once", action="store_true", help="Fetch once, print the HTML fragment and exit")
    return p.parse_args(argv)


def run_once(config: Config) -> int:
    app = WindApp(config, threaded=False)
    app.presenter.request_update()
    print(render_html(app.presenter.render()))
    return 0 if app.presenter.reading is not None else 1


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    try:
        config = Config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config)

    if args.once:
        sys.exit(run_once(config))

    app = WindApp(config)

    def _signal_handler(signum, frame):
        logging.info(f"Received signal {signum}, shutting down...")
        app.shutdown()
        sys.exit(0)

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        app.run_forever()
    except KeyboardInterrupt:
        logging.info("Application interrupted")
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        app.shutdown()


if __name__ == "__main__":
    main()
