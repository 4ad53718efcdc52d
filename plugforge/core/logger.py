from pathlib import Path
import sys

from loguru import logger

from plugforge.config.schema import Config


def _stderr_sink(message):
    # Resolve sys.stderr at write time so redirected streams (CliRunner) are honored.
    sys.stderr.write(message)


def configure_logger(config: Config):
    """Configure loguru logger based on settings."""
    logger.remove() # Remove default handler

    # Console (stderr)
    logger.add(_stderr_sink, level=config.logging.level, format="{level: <8} | {message}")

    # File
    if config.logging.file_enabled:
        path = Path(config.logging.file_path).expanduser()
        try:
            logger.add(
                path,
                rotation=config.logging.rotation,
                retention=config.logging.retention,
                level=config.logging.level,
            )
        except OSError as e:
            logger.warning(f"File logging disabled, cannot open {path}: {e}")
