# common/file_utils.py
# -*- coding: utf-8 -*-
"""
Line-oriented editing of shell resource files.

Files are handled as ordered sequences of opaque lines and are never
parsed as shell syntax. Lines are split on "\\n" only and keep their own
endings, and bytes that are not valid UTF-8 are carried through
unchanged, so an edit touches nothing but the line it adds or replaces.
Every editing helper is idempotent: running it again with the same
arguments leaves the file unchanged.
"""

import datetime
import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from setup.config_models import AppSettings

from .command_utils import get_symbols, log_setup, run_elevated_command

module_logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# Undecodable bytes round-trip as lone surrogates
FILE_ENCODING = "utf-8"
FILE_ERRORS = "surrogateescape"

PatternLike = Union[str, "re.Pattern[str]"]


def _compile(pattern: PatternLike) -> "re.Pattern[str]":
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


def _read_raw_lines(file_path: Path) -> List[str]:
    """Lines split on "\\n" only, each with its original ending (if any)."""
    if not file_path.is_file():
        return []
    with open(
        file_path, "r", encoding=FILE_ENCODING, errors=FILE_ERRORS, newline=""
    ) as f:
        content = f.read()
    lines = [part + "\n" for part in content.split("\n")]
    last = lines.pop()[:-1]
    if last:
        lines.append(last)
    return lines


def _strip_ending(raw_line: str) -> str:
    if raw_line.endswith("\n"):
        raw_line = raw_line[:-1]
    if raw_line.endswith("\r"):
        raw_line = raw_line[:-1]
    return raw_line


def _terminate_last(raw_lines: List[str]) -> None:
    if raw_lines and not raw_lines[-1].endswith("\n"):
        raw_lines[-1] += "\n"


def read_lines(file_path: Path) -> List[str]:
    """Return the lines of a file without line endings; [] if it does not exist."""
    return [_strip_ending(line) for line in _read_raw_lines(file_path)]


def _write_atomically(file_path: Path, content: str) -> None:
    """
    Replace the file's content via a temp file in the same directory.

    A symlinked file is written through: the link's target is replaced and
    the link stays in place. The original permission bits are kept.
    """
    target = Path(os.path.realpath(file_path))
    target.parent.mkdir(parents=True, exist_ok=True)
    mode = target.stat().st_mode if target.exists() else None
    fd, tmp_name = tempfile.mkstemp(
        dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(
            fd, "w", encoding=FILE_ENCODING, errors=FILE_ERRORS, newline=""
        ) as f:
            f.write(content)
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def file_contains(file_path: Path, pattern: PatternLike) -> bool:
    """True if any line of the file matches the regex (re.search semantics)."""
    regex = _compile(pattern)
    return any(regex.search(line) for line in read_lines(file_path))


def backup_file(
    file_path: Path,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """
    Copy a file to "<file>.backup.<YYYYmmdd_HHMMSS>" in the same directory.

    Parameters:
        file_path (Path): The file to back up.
        app_settings (Optional[AppSettings]): Settings providing the log symbols.
        current_logger (Optional[logging.Logger]): Logger to use.

    Returns:
        Optional[Path]: The backup path, or None when the file does not exist
        and there was nothing to back up.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not file_path.is_file():
        log_setup(
            f"{symbols.get('info', 'ℹ️')} File {file_path} does not exist. No backup needed.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return None

    timestamp = datetime.datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)
    backup_path = file_path.with_name(f"{file_path.name}.backup.{timestamp}")
    # Never overwrite an earlier backup taken within the same second
    counter = 1
    while backup_path.exists():
        backup_path = file_path.with_name(
            f"{file_path.name}.backup.{timestamp}_{counter}"
        )
        counter += 1
    shutil.copy2(file_path, backup_path)
    log_setup(
        f"{symbols.get('info', 'ℹ️')} Backed up {file_path} to {backup_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    return backup_path


def append_line_if_absent(
    file_path: Path,
    line: str,
    app_settings: Optional[AppSettings],
    pattern: Optional[PatternLike] = None,
    create_missing: bool = True,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Append a line unless a line matching the detection pattern already exists.

    Parameters:
        file_path (Path): Target resource file.
        line (str): Line to ensure.
        app_settings (Optional[AppSettings]): Settings providing the log symbols.
        pattern (Optional[PatternLike]): Detection regex. Defaults to the
            escaped line itself, so the line is matched literally.
        create_missing (bool): Create the file when it does not exist. When
            False a missing file is left alone.
        current_logger (Optional[logging.Logger]): Logger to use.

    Returns:
        bool: True if the file was changed.
    """
    return append_block_if_absent(
        file_path,
        pattern if pattern is not None else re.escape(line),
        [line],
        app_settings,
        create_missing=create_missing,
        separate=False,
        current_logger=current_logger,
    )


def append_block_if_absent(
    file_path: Path,
    pattern: PatternLike,
    block: List[str],
    app_settings: Optional[AppSettings],
    create_missing: bool = True,
    separate: bool = True,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Append a block of lines unless a line matching pattern already exists.

    With separate=True a blank line is written ahead of the block when the
    file is not empty.

    Returns:
        bool: True if the file was changed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not file_path.exists() and not create_missing:
        log_setup(
            f"{symbols.get('info', 'ℹ️')} {file_path} does not exist, leaving it alone.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return False

    regex = _compile(pattern)
    if file_contains(file_path, regex):
        log_setup(
            f"{file_path.name} already contains a line matching '{regex.pattern}'.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return False

    raw_lines = _read_raw_lines(file_path)
    _terminate_last(raw_lines)
    if separate and raw_lines:
        raw_lines.append("\n")
    raw_lines.extend(f"{line}\n" for line in block)
    _write_atomically(file_path, "".join(raw_lines))
    log_setup(
        f"{symbols.get('info', 'ℹ️')} Added {block[-1]!r} to {file_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    return True


def replace_line_or_append(
    file_path: Path,
    pattern: PatternLike,
    new_line: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """
    Replace the line matching pattern with new_line, or append new_line.

    The file is backed up first. Should several lines match, the first one
    is replaced and the others are dropped, so exactly one matching line
    remains.

    Parameters:
        file_path (Path): Target resource file; created when missing.
        pattern (PatternLike): Regex identifying the line, e.g. r"^plugins=".
        new_line (str): Replacement line. It must itself match pattern.
        app_settings (Optional[AppSettings]): Settings providing the log symbols.
        current_logger (Optional[logging.Logger]): Logger to use.

    Returns:
        Optional[Path]: The backup path, or None if the file did not exist.
    """
    logger_to_use = current_logger if current_logger else module_logger
    regex = _compile(pattern)

    backup_path = backup_file(file_path, app_settings, logger_to_use)

    new_lines: List[str] = []
    replaced = False
    for raw_line in _read_raw_lines(file_path):
        text = _strip_ending(raw_line)
        if regex.search(text):
            if not replaced:
                # The replacement keeps the ending of the line it replaces
                new_lines.append(new_line + raw_line[len(text):])
                replaced = True
            continue
        new_lines.append(raw_line)

    if not replaced:
        _terminate_last(new_lines)
        new_lines.append(f"{new_line}\n")

    _write_atomically(file_path, "".join(new_lines))
    log_setup(
        f"{'Replaced' if replaced else 'Appended'} {new_line!r} in {file_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    return backup_path


def append_line_to_system_file(
    file_path: Path,
    line: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Append a line to a root-owned file (e.g. /etc/shells) unless an
    identical line exists.

    Returns:
        bool: True if the line was appended.

    Raises:
        subprocess.CalledProcessError: The elevated append failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if line in read_lines(file_path):
        log_setup(
            f"{symbols.get('info', 'ℹ️')} {line} already present in {file_path}",
            "info",
            logger_to_use,
            app_settings,
        )
        return False

    log_setup(
        f"{symbols.get('info', 'ℹ️')} Adding {line} to {file_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    run_elevated_command(
        ["tee", "-a", str(file_path)],
        app_settings,
        cmd_input=f"{line}\n",
        capture_output=True,
        current_logger=logger_to_use,
    )
    return True


def ensure_directory(
    dir_path: Path,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Create a user-owned directory (and parents) if needed."""
    logger_to_use = current_logger if current_logger else module_logger
    if not dir_path.is_dir():
        dir_path.mkdir(parents=True, exist_ok=True)
        log_setup(
            f"Created directory: {dir_path}",
            "debug",
            logger_to_use,
            app_settings,
        )


