"""Main entry point for the event tracker service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import signal
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

from event_tracker.config.environment import EnvironmentConfig
from event_tracker.config.exceptions import ConfigurationError
from event_tracker.config.loader import load_config
from event_tracker.config.models import AppConfig
from event_tracker.logging import get_logger
from event_tracker.logging.config import configure_logging
from event_tracker.persistence.repositories import build_repositories
from event_tracker.pipeline import ScanPipeline, summarize
from event_tracker.pipeline.models import ProgressMessage
from event_tracker.scheduler import SchedulerService
from event_tracker.web import create_app

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def _print_progress(message: ProgressMessage) -> None:
    print(str(message), flush=True)


def main(argv=None) -> int:
    """
    Main entry point for the event tracker.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()
    parser = argparse.ArgumentParser(
        description="Event Tracker - local event list with a daily AI web scan"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--scan-now",
        action="store_true",
        help="Run a single scan, print its progress and exit",
    )
    parser.add_argument(
        "--no-scheduler",
        action="store_true",
        help="Serve the API without registering the daily scan",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    args = parser.parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        events, metadata = build_repositories(app_config.storage)
        pipeline = ScanPipeline(
            app_config=app_config,
            env_config=env_config,
            event_repo=events,
            meta_repo=metadata,
        )

        logger.info(
            "Event tracker starting",
            extra={
                "event": "service.starting",
                "port": app_config.server.port,
                "api_key_set": env_config.has_api_key,
                "data_file": str(events.store.path),
                "region": app_config.region.name,
                "schedule": app_config.schedule.cron if app_config.schedule.enabled else None,
            },
        )
        if not env_config.has_api_key:
            logger.warning(
                "ANTHROPIC_API_KEY is not set; scans will fail until it is added to the environment",
                extra={"event": "service.api_key_missing"},
            )

        if args.scan_now:
            result = pipeline.run_scan(progress=_print_progress)
            summary, exit_code = summarize(result)
            print(summary)
            return exit_code

        return _serve(app_config, env_config, pipeline, events, metadata, args.no_scheduler, start_time)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0


def _serve(app_config, env_config, pipeline, events, metadata, no_scheduler, start_time) -> int:
    scheduler_service = None
    if app_config.schedule.enabled and not no_scheduler:
        scheduler_service = SchedulerService(
            scan_callable=pipeline.run_scan,
            cron=app_config.schedule.cron,
            timezone=app_config.schedule.timezone,
        )
        scheduler_service.start()

    def handle_sigterm(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        raise SystemExit(0)

    signal.signal(signal.SIGTERM, handle_sigterm)

    app = create_app(
        pipeline=pipeline,
        events=events,
        metadata=metadata,
        env_config=env_config,
        static_dir=app_config.server.static_dir,
    )

    logger.info(
        f"Serving on http://{app_config.server.host}:{app_config.server.port}",
        extra={"event": "service.http.started"},
    )
    try:
        app.run(
            host=app_config.server.host,
            port=app_config.server.port,
            threaded=True,
            use_reloader=False,
        )
    finally:
        if scheduler_service is not None:
            scheduler_service.shutdown(wait=False)
        logger.info(
            "Event tracker stopped",
            extra={
                "event": "service.stopping",
                "uptime_seconds": round(time.time() - start_time, 2),
            },
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
