"""
Logging for the Permit2 swap runner: console output, a daily log file
and a separate error log, plus a one-line record per swap attempt.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Optional


# Log directory (override with LOG_DIR)
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))

# Log formats
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    console: bool = True,
    detailed: bool = False,
    log_dir: Optional[Path] = None,
    to_file: bool = True,
) -> logging.Logger:
    """
    Attach the run's handlers to the *name* logger.

    The CLI calls this once with ``"permit2_swap"``; every module logs
    through ``logging.getLogger(__name__)`` and propagates here. Output goes
    to stdout, to ``<log_dir>/<name>.log`` (rotated at midnight) and, for
    ERROR and above, to ``<log_dir>/<name>_errors.log``. Calling it again for
    the same name returns the logger unchanged.

    Args:
        log_dir: Directory for log files (defaults to LOG_DIR)
        to_file: Set False to keep a run console-only
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    # Choose format
    log_format = DETAILED_FORMAT if detailed else SIMPLE_FORMAT
    formatter = logging.Formatter(log_format, datefmt=DATE_FORMAT)

    # Console handler
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if not to_file:
        return logger

    directory = Path(log_dir) if log_dir is not None else LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    # File handler with daily rotation
    if log_file is None:
        log_file = f"{name}.log"

    file_handler = TimedRotatingFileHandler(
        directory / log_file,
        when="midnight",
        interval=1,
        backupCount=30,  # Keep 30 days of logs
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Separate error log
    error_handler = RotatingFileHandler(
        directory / f"{name}_errors.log",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(error_handler)

    return logger


def log_swap(
    logger: logging.Logger,
    sell_token: str,
    buy_token: str,
    sell_amount: int,
    tx_hash: Optional[str] = None,
    success: bool = True,
    reason: Optional[str] = None,
):
    """
    Log a swap submission attempt in structured format.

    Args:
        logger: Logger instance
        sell_token: Sell token address
        buy_token: Buy token address
        sell_amount: Sell amount in base units
        tx_hash: Transaction hash, if broadcast
        success: Whether the transaction was broadcast
        reason: Why the swap was not broadcast
    """
    status = "SENT" if success else "SKIPPED"
    msg = f"SWAP {status} | {sell_token} -> {buy_token} | sellAmount: {sell_amount}"
    if tx_hash:
        msg += f" | TX: {tx_hash}"
    if reason:
        msg += f" | {reason}"

    if success:
        logger.info(msg)
    else:
        logger.error(msg)
