"""Lock manager for run files.

Provides PID-based file locking so only one process rewrites a run file
at a time. Includes stale lock detection for crash recovery.

Uses atomic file creation (O_CREAT | O_EXCL) to prevent TOCTOU races.
"""

import contextlib
import os
from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path

from ..constants import LOCK_SUFFIX, MAX_LOCK_RETRIES, STALE_LOCK_SECONDS
from ..models import Lock


class LockError(Exception):
    """Error acquiring or managing a run file lock."""


def lock_path_for(run_path: Path) -> Path:
    """Get path to the lock file guarding a run file."""
    return run_path.with_name(run_path.name + LOCK_SUFFIX)


def _is_pid_running(pid: int) -> bool:
    """Check if a process with given PID is running."""
    try:
        os.kill(pid, 0)  # Signal 0 only checks for existence
        return True
    except OSError:
        return False


def get_current_lock(run_path: Path) -> Lock | None:
    """Get the lock on a run file if one exists and is readable.

    Args:
        run_path: Path to the run file

    Returns:
        Lock if a valid lock exists, None otherwise
    """
    lock_path = lock_path_for(run_path)
    if not lock_path.exists():
        return None

    try:
        return Lock.model_validate_json(lock_path.read_text())
    except (OSError, ValueError):
        # Corrupted or vanished lock file - treat as no lock
        return None


def is_stale_lock(lock: Lock, timeout_seconds: int = STALE_LOCK_SECONDS) -> bool:
    """Check if lock is stale (PID dead or heartbeat too old).

    Args:
        lock: Lock to check
        timeout_seconds: Max time since heartbeat before considered stale

    Returns:
        True if lock is stale and should be cleared
    """
    if not _is_pid_running(lock.pid):
        return True

    age = datetime.now() - lock.last_heartbeat
    return age > timedelta(seconds=timeout_seconds)


def _try_atomic_create(lock_path: Path, lock: Lock) -> bool:
    """Attempt atomic lock file creation.

    Returns:
        True if lock was created, False if file already exists
    """
    try:
        fd = os.open(str(lock_path), os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        try:
            os.write(fd, lock.model_dump_json(indent=2).encode())
        finally:
            os.close(fd)
        return True
    except FileExistsError:
        return False


def acquire_lock(run_path: Path, command: str) -> Lock:
    """Acquire the lock on a run file.

    Args:
        run_path: Run file about to be modified
        command: Command acquiring the lock

    Returns:
        Lock object if acquired

    Raises:
        LockError: If another live process holds the lock
    """
    lock_path = lock_path_for(run_path)
    lock = Lock(pid=os.getpid(), run_file=str(run_path), command=command)

    for _ in range(MAX_LOCK_RETRIES):
        if _try_atomic_create(lock_path, lock):
            return lock

        existing = get_current_lock(run_path)
        if existing is None:
            # Corrupted lock: clear it and retry
            with contextlib.suppress(FileNotFoundError):
                lock_path.unlink()
            continue

        if existing.pid == os.getpid():
            lock_path.write_text(lock.model_dump_json(indent=2))
            return lock

        if is_stale_lock(existing):
            with contextlib.suppress(FileNotFoundError):
                lock_path.unlink()
            continue

        raise LockError(
            f"Run file is locked by PID {existing.pid} (command: {existing.command})"
        )

    raise LockError("Failed to acquire lock after multiple attempts")


def release_lock(run_path: Path) -> None:
    """Release the lock on a run file if owned by this process."""
    existing = get_current_lock(run_path)
    if existing and existing.pid == os.getpid():
        lock_path_for(run_path).unlink(missing_ok=True)


@contextlib.contextmanager
def locked_run(run_path: Path, command: str) -> Iterator[Lock]:
    """Hold the run file lock for the duration of a block."""
    lock = acquire_lock(run_path, command)
    try:
        yield lock
    finally:
        release_lock(run_path)
