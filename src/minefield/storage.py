"""
Save and load boards as JSON files.

A saved game holds the whole board state, including the mine seed and
origin, so a reloaded game continues exactly where it was left.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .board import Board

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

PathLike = Union[str, Path]


class StorageError(ValueError):
    """Raised when a saved game payload cannot be turned into a board."""


def board_to_payload(board: Board) -> Dict[str, Any]:
    """Wrap a board's plain-data state with the format version."""
    return {"version": FORMAT_VERSION, "board": board.to_dict()}


def board_from_payload(payload: Dict[str, Any]) -> Board:
    """
    Rebuild a board from a saved payload.

    Raises:
        StorageError: If the payload has the wrong version or shape.
    """
    version = payload.get("version") if isinstance(payload, dict) else None
    if version != FORMAT_VERSION:
        raise StorageError(f"Unsupported save format version: {version!r}")
    try:
        return Board.from_dict(payload["board"])
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Invalid saved board: {exc}") from exc


def save_game(board: Board, path: PathLike) -> Path:
    """
    Write a board to ``path``.

    The file is written next to its destination first and then moved
    into place, so an interrupted save keeps the previous file. A failed
    write removes its temporary file and re-raises.

    Returns:
        The path written.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(target.suffix + ".tmp")
    try:
        tmp.write_text(json.dumps(board_to_payload(board)), encoding="utf-8")
        tmp.replace(target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    logger.debug("Saved game to %s", target)
    return target


def load_game(path: PathLike) -> Optional[Board]:
    """
    Read a board saved with ``save_game``.

    Returns:
        The board, or None if the file is missing or unreadable.
    """
    source = Path(path)
    if not source.exists():
        logger.warning("Saved game %s does not exist", source)
        return None
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Corrupted or unreadable saved game %s", source)
        return None
    try:
        return board_from_payload(payload)
    except StorageError:
        logger.exception("Failed to load game from %s", source)
        return None
