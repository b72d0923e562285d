"""Durable key-value storage for cart and wishlist snapshots.

The storage medium is a single JSON document (optionally Fernet encrypted)
written atomically with a configurable number of rotating backups. On top of
that sits :class:`DurableStore`, which namespaces every key and never lets a
storage failure escape to the caller: unreadable data is reported as absent
and failed writes are logged.
"""
from __future__ import annotations

import base64
import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken

from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_NAMESPACE = "ee-plp"


class StoreError(RuntimeError):
    """Raised when a storage medium cannot be read or written."""


class MemoryMedium:
    """In-process medium; contents live as long as the instance."""

    def __init__(self) -> None:
        self._blob: str | None = None

    def read(self) -> Dict[str, Any]:
        if self._blob is None:
            return {}
        return json.loads(self._blob)

    def write(self, data: Dict[str, Any]) -> None:
        try:
            self._blob = json.dumps(data)
        except (TypeError, ValueError) as exc:
            raise StoreError(str(exc)) from exc


class JsonFileMedium:
    """JSON document on disk with atomic writes and ``.bakN`` backups.

    When the primary file is missing or corrupt the newest readable backup is
    used instead, so an interrupted write never loses the previous session.
    """

    def __init__(self, path: Path | str, backups: int = 2):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.backups = max(0, backups)

    # ------------------------------------------------------------------
    # Encoding hooks
    # ------------------------------------------------------------------
    def _decode(self, blob: bytes) -> Dict[str, Any] | None:
        try:
            data = json.loads(blob.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return None
        return data if isinstance(data, dict) else None

    def _encode(self, data: Dict[str, Any]) -> bytes:
        return json.dumps(data, indent=2).encode("utf-8")

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------
    def _backup_path(self, index: int) -> Path:
        return self.path.with_suffix(self.path.suffix + f".bak{index}")

    def _candidate_paths(self) -> list[Path]:
        return [self.path] + [self._backup_path(idx) for idx in range(1, self.backups + 1)]

    def _read_file(self, path: Path) -> Dict[str, Any] | None:
        if not path.exists():
            return None
        try:
            blob = path.read_bytes()
        except OSError as exc:
            raise StoreError(str(exc)) from exc
        if not blob:
            return {}
        return self._decode(blob)

    def _rotate_backups(self) -> None:
        for idx in range(self.backups, 0, -1):
            src = self.path if idx == 1 else self._backup_path(idx - 1)
            if src.exists():
                try:
                    os.replace(src, self._backup_path(idx))
                except OSError:
                    continue

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def read(self) -> Dict[str, Any]:
        for candidate in self._candidate_paths():
            data = self._read_file(candidate)
            if data is None:
                continue
            if candidate != self.path:
                logger.warning("Recovered storage from backup %s", candidate.name)
            return data
        return {}

    def write(self, data: Dict[str, Any]) -> None:
        try:
            payload = self._encode(data)
        except (TypeError, ValueError) as exc:
            raise StoreError(str(exc)) from exc
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp_path.open("wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            self._rotate_backups()
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StoreError(str(exc)) from exc
        finally:
            tmp_path.unlink(missing_ok=True)


def _derive_key(secret: str) -> bytes:
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class EncryptedFileMedium(JsonFileMedium):
    """File medium whose payload is encrypted with Fernet."""

    def __init__(self, path: Path | str, secret: str, backups: int = 2):
        if not secret:
            raise ValueError("secret is required")
        super().__init__(path, backups=backups)
        self._fernet = Fernet(_derive_key(secret))

    def _decode(self, blob: bytes) -> Dict[str, Any] | None:
        try:
            decrypted = self._fernet.decrypt(blob)
        except InvalidToken:
            return None
        return super()._decode(decrypted)

    def _encode(self, data: Dict[str, Any]) -> bytes:
        return self._fernet.encrypt(super()._encode(data))


class DurableStore:
    """Namespaced, failure-absorbing view over a storage medium.

    ``get`` returns ``None`` for keys that were never written and for any
    medium that cannot be read. ``set`` logs failures instead of raising.
    Every key is stored as ``"<namespace>:<key>"``.
    """

    def __init__(self, medium: Any | None = None, namespace: str = DEFAULT_NAMESPACE):
        self.medium = medium if medium is not None else MemoryMedium()
        self.namespace = namespace

    def _qualify(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def _read(self) -> Dict[str, Any] | None:
        try:
            return self.medium.read()
        except (StoreError, ValueError) as exc:
            logger.warning("Storage unavailable, treating as empty: %s", exc)
            return None

    def get(self, key: str) -> Any | None:
        data = self._read()
        if not data:
            return None
        return data.get(self._qualify(key))

    def set(self, key: str, value: Any) -> None:
        # Read-modify-write keeps keys owned by other namespaces intact.
        data = self._read() or {}
        data[self._qualify(key)] = value
        try:
            self.medium.write(data)
        except StoreError as exc:
            logger.warning("Failed to persist %s: %s", self._qualify(key), exc)

    def remove(self, key: str) -> None:
        data = self._read()
        if not data or self._qualify(key) not in data:
            return
        del data[self._qualify(key)]
        try:
            self.medium.write(data)
        except StoreError as exc:
            logger.warning("Failed to remove %s: %s", self._qualify(key), exc)


def open_store(
    path: Path | str,
    namespace: str = DEFAULT_NAMESPACE,
    *,
    secret: str = "",
    backups: int = 2,
) -> DurableStore:
    """Return a :class:`DurableStore` backed by a (possibly encrypted) file."""

    if secret:
        medium: JsonFileMedium = EncryptedFileMedium(path, secret, backups=backups)
    else:
        medium = JsonFileMedium(path, backups=backups)
    return DurableStore(medium, namespace)
