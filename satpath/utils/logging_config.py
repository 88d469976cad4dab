"""
Handlers for the satpath loggers.

The modules only create named loggers (satpath.kepler.kepler_eq,
satpath.orbits.sampler, ...). Hosts that do not configure logging
themselves can call setup_logging() to see solver and propagation
warnings; the root logger is left alone.
"""

import logging
import sys
from pathlib import Path

FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_level: str = 'WARNING', log_file: str = None):
    """
    Attach handlers to the top-level satpath logger.

    Args:
        log_level: 'DEBUG' shows sampler cache hits, 'WARNING' (default)
            only non-converged Kepler solutions and skipped samples
        log_file: optional log file path; parent directories are created

    Returns:
        the configured satpath logger
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    formatter = logging.Formatter(FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    logger = logging.getLogger('satpath')
    logger.setLevel(level)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("satpath logging: level=%s, file=%s", log_level, log_file)
    return logger
