"""Small file-system and naming helpers shared by SubEdit modules."""

import os
import logging
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

def ensure_dir_exists(dir_path: str) -> str:
    """
    Creates dir_path (and parents) unless it is already a directory.

    Returns:
        dir_path, for chaining into os.path.join.

    Raises:
        ValueError: If dir_path is empty.
        FileSystemError: If the path is taken by a file or cannot be created.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    if os.path.isdir(dir_path):
        return dir_path
    if os.path.exists(dir_path):
        raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    try:
        os.makedirs(dir_path, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create directory {dir_path}: {e}") from e
    logger.info(f"Created directory: {dir_path}")
    return dir_path

def path_in_dir(dir_path: str, file_name: str) -> str:
    """Joins file_name onto dir_path, creating the directory first."""
    return os.path.join(ensure_dir_exists(dir_path), file_name)

def base_name(file_name: str) -> str:
    """File name without directory and without its final extension ('talk.v2.mp4' -> 'talk.v2')."""
    return os.path.splitext(os.path.basename(file_name))[0]
