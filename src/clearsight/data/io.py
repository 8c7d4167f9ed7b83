"""
io.py
-----

I/O utilities for saving and loading clearsight data.

Supports:
- JSON history of SessionResult records (most recent first)
- CSV for human-readable per-trial logs

Notes
-----
- The history file is a JSON array of flat records with exactly the keys
  timestamp, trials and thresholdNorm.
- Malformed history records are skipped with a warning instead of raising.
"""

from __future__ import annotations

import csv
import json
import logging
import warnings
from pathlib import Path
from typing import Union

from .dataset import GapDirection, SessionResult, TrialLog, TrialOutcome

PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


class SessionHistory:
    """
    Most-recent-first history of completed sessions.

    Parameters
    ----------
    path : str or Path, optional
        JSON file backing the history. If None, the history lives in memory
        only.

    Notes
    -----
    The backing file is read on first use (append, read_all, len or
    iteration), so appending through a fresh instance extends the stored
    history instead of replacing it. Call load() to re-read the file.

    Examples
    --------
    >>> history = SessionHistory()
    >>> history.append(SessionResult(timestamp=0, trials=30, threshold_norm=0.1))
    >>> len(history)
    1
    """

    def __init__(self, path: PathLike | None = None):
        self.path = Path(path) if path is not None else None
        self._results: list[SessionResult] = []
        self._loaded = self.path is None

    def load(self) -> list[SessionResult]:
        """
        Read the history from disk, replacing the in-memory copy.

        A missing file is an empty history. A file that is not a JSON array
        is treated as empty, and individual malformed records are skipped;
        both cases emit a UserWarning.

        Returns
        -------
        list[SessionResult]
            The loaded history, most recent first.
        """
        self._results = self._read_file()
        self._loaded = True
        return list(self._results)

    def append(self, result: SessionResult) -> None:
        """
        Insert a result at the front of the history and persist it.

        If writing the file fails the result is removed again and the error
        propagates, leaving the history as it was.

        Parameters
        ----------
        result : SessionResult
        """
        if not isinstance(result, SessionResult):
            raise TypeError(
                f"expected SessionResult, got {type(result).__name__}"
            )
        self._ensure_loaded()
        self._results.insert(0, result)
        try:
            self._save()
        except OSError:
            del self._results[0]
            raise

    def read_all(self) -> list[SessionResult]:
        """Return a copy of the history, most recent first."""
        self._ensure_loaded()
        return list(self._results)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _read_file(self) -> list[SessionResult]:
        if self.path is None or not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            warnings.warn(
                f"could not read session history {self.path}: {exc}; starting empty",
                UserWarning,
                stacklevel=3,
            )
            return []

        if not isinstance(raw, list):
            warnings.warn(
                f"session history {self.path} is not a JSON array; starting empty",
                UserWarning,
                stacklevel=3,
            )
            return []

        results = []
        for i, record in enumerate(raw):
            try:
                results.append(SessionResult.from_record(record))
            except (TypeError, ValueError) as exc:
                warnings.warn(
                    f"skipping malformed session record #{i}: {exc}",
                    UserWarning,
                    stacklevel=3,
                )
        logger.debug("loaded %d session(s) from %s", len(results), self.path)
        return results

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [r.to_record() for r in self._results]
        self.path.write_text(json.dumps(payload), encoding="utf-8")
        logger.info("saved %d session(s) to %s", len(self._results), self.path)

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._results)

    def __iter__(self):
        return iter(self.read_all())


def save_trial_log_csv(log: TrialLog, path: PathLike) -> None:
    """
    Save a TrialLog to a CSV file.

    Parameters
    ----------
    log : TrialLog
    path : str or Path
    """
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["index", "size_norm", "judged", "actual", "correct"])
        for o in log:
            writer.writerow(
                [o.index, repr(o.size_norm), o.judged.value, o.actual.value, int(o.correct)]
            )


def load_trial_log_csv(path: PathLike) -> TrialLog:
    """
    Load a TrialLog from a CSV file.

    The ``correct`` column is informational; correctness is re-derived from
    the judged and actual directions.

    Parameters
    ----------
    path : str or Path

    Returns
    -------
    TrialLog
    """
    log = TrialLog()
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            log.add(
                TrialOutcome(
                    index=int(row["index"]),
                    size_norm=float(row["size_norm"]),
                    judged=GapDirection(row["judged"]),
                    actual=GapDirection(row["actual"]),
                )
            )
    return log
