"""
Webhook redeployer CLI entry point.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

import yaml
from docker.errors import DockerException
from pydantic import ValidationError

from webhook_redeployer.config import RedeployerConfig
from webhook_redeployer.logging_config import setup_logging as setup_full_logging

DEFAULT_CONFIG_PATH = "/etc/webhook-redeployer/config.yml"


def setup_logging(config: RedeployerConfig, verbose: bool = False) -> None:
    """Setup logging, falling back to stdout only if the log directory is unusable."""
    console_level = "DEBUG" if verbose else config.logging.console_level

    log_dir = config.logging.directory
    parent = Path(log_dir).parent
    if not os.access(parent, os.W_OK) and not Path(log_dir).exists():
        log_dir = str(Path.home() / ".local" / "log" / "webhook-redeployer")

    try:
        setup_full_logging(
            log_dir=log_dir,
            console_level=console_level,
            file_level=config.logging.file_level,
            use_json=config.logging.use_json,
        )
    except OSError:
        logging.basicConfig(
            level=getattr(logging, console_level),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)],
        )


def main() -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Redeploy a container when Docker Hub announces a new image"
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file",
    )

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    parser.add_argument(
        "--generate-config",
        action="store_true",
        help="Generate default configuration file and exit",
    )

    parser.add_argument(
        "--validate-config", action="store_true", help="Validate configuration file and exit"
    )

    args = parser.parse_args()

    if args.generate_config:
        RedeployerConfig().save(args.config)
        print(f"Generated default configuration at: {args.config}")
        return 0

    try:
        config = RedeployerConfig.from_file(args.config)
    except (OSError, ValueError, ValidationError, yaml.YAMLError) as e:
        print(f"Configuration invalid: {e}", file=sys.stderr)
        return 1

    if args.validate_config:
        print(f"Configuration valid: {args.config}")
        return 0

    setup_logging(config, args.verbose)
    logger = logging.getLogger(__name__)

    from webhook_redeployer.manager import RedeployManager

    try:
        manager = RedeployManager(config)
    except DockerException as e:
        logger.critical(f"Failed to create docker client: {e}")
        return 1

    try:
        asyncio.run(manager.run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        # Print to stderr for systemd journal
        print(f"Error running webhook redeployer: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
