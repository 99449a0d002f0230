# utils.py
"""
Utility functions for the particle network.

This module provides helper functions, such as logging setup, configuration
loading and colour parsing, that are used across different parts of the
application but do not belong to a specific domain like the simulation or
the page host.
"""
import logging
import logging.handlers
import json
import os
from functools import lru_cache
from typing import Dict, Any, Tuple

import pygame

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#   - Invariants: After this function runs, the logging system is
#     initialized and ready for use throughout the application.
#
# parse_color(value: str) -> pygame.Color:
#   - Inputs: a CSS-style colour string ("#rrggbb", "#rgb", or a named colour).
#   - Outputs: a new opaque pygame.Color on every call.
#   - Raises: ValueError if the string is empty or not a colour.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/particles.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

@lru_cache(maxsize=64)
def parse_rgb(value: str) -> Tuple[int, int, int]:
    """
    Converts a colour string into an (r, g, b) tuple.

    Cached because the renderer converts the same two or three theme colours
    thousands of times per frame. The cached value is an immutable tuple.
    """
    value = value.strip()
    if not value:
        raise ValueError("Empty colour string.")
    # pygame.Color raises ValueError for unknown names and malformed hex codes.
    color = pygame.Color(value)
    return (color.r, color.g, color.b)

def parse_color(value: str) -> pygame.Color:
    """Converts a colour string into a pygame.Color the caller may modify."""
    return pygame.Color(*parse_rgb(value))
