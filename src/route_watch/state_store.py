# --- Standard library imports ---
import os
import json
import fcntl
import tempfile
from pathlib import Path
from contextlib import contextmanager
from typing import Callable, Iterator

# --- Project imports ---
from .logger import get_logger
from .models import MonitorState, Status


logger = get_logger("state_store")

class StateStore:
    """
    Single-record store for the last observed route status.

    On-disk layout (JSON):
        {"last_status": "STABLE", "last_check": 1760745600}

    Reads fail soft: absence or corruption is the UNKNOWN default so that a
    damaged file can never block alerting. Writes go through a temp file and
    `os.replace` so a crash mid-write leaves the previous record intact.
    """

    def __init__(self, path: Path, clock: Callable[[], int]):
        self.path = Path(path)
        self.clock = clock
        self.lock_path = self.path.with_name(self.path.name + ".lock")

    def load(self) -> MonitorState:
        """
        Return the persisted state, or `MonitorState()` (UNKNOWN, 0)
        when the record is missing, unreadable or malformed.
        """
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            logger.debug(f"No state file at {self.path}; starting from UNKNOWN")
            return MonitorState()
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError, OSError) as e:
            logger.warning(f"State file unreadable ({type(e).__name__}: {e}); treating as absent")
            return MonitorState()

        try:
            return self._decode(data)
        except (TypeError, ValueError, KeyError) as e:
            logger.warning(f"State file malformed ({e}); treating as absent")
            return MonitorState()

    @staticmethod
    def _decode(data) -> MonitorState:
        status = Status[data["last_status"]]
        last_check = data["last_check"]

        # bool is an int subclass; reject it explicitly
        if isinstance(last_check, bool) or not isinstance(last_check, int):
            raise TypeError(f"last_check must be an integer, got {last_check!r}")
        if last_check < 0:
            raise ValueError(f"last_check must be >= 0, got {last_check}")

        return MonitorState(last_status=status, last_check=last_check)

    def save(self, status: Status) -> bool:
        """
        Persist `status` with the current time.

        Best-effort: an I/O failure is logged at warning and reported
        through the return value, never raised.
        """
        record = {"last_status": status.name, "last_check": self.clock()}
        tmp_name = None

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", dir=self.path.parent, prefix=f".{self.path.name}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                json.dump(record, tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.warning(f"Failed to persist state to {self.path} ({type(e).__name__}: {e})")
            if tmp_name:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            return False

        logger.debug(f"State saved → {record}")
        return True

    @contextmanager
    def locked(self) -> Iterator[bool]:
        """
        Hold an advisory lock for the duration of one cycle.

        Yields True when this process owns the lock, False when another
        invocation already holds it. If the lock file cannot be opened or
        the filesystem refuses the lock, the cycle proceeds unlocked.
        """
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.lock_path, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as e:
            logger.warning(f"Cannot open lock file {self.lock_path} ({e}); running unlocked")
            yield True
            return

        try:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                yield False
                return
            except OSError as e:
                # e.g. ENOLCK on a network filesystem
                logger.warning(f"Cannot lock {self.lock_path} ({e}); running unlocked")
                yield True
                return

            try:
                yield True
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)
