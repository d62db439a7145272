"""Secure file storage for Claude subscription OAuth credentials"""

import json
import logging
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from settings import AUTH_FILE_NAME, DATA_DIRECTORY
from utils.rwlock import get_document_lock
from .exceptions import CredentialsStorageError
from .models import AuthData

logger = logging.getLogger(__name__)

AUTH_FILE_MODE = 0o600
AUTH_DIR_MODE = 0o700


class CredentialStore:
    """Secure on-disk storage for the credential document (auth.json)

    The document is created lazily on first save and written with owner-only
    permissions. Reads and writes of the same file are guarded by a
    process-wide reader/writer lock.
    """

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = Path(data_dir if data_dir else DATA_DIRECTORY).expanduser()
        self.auth_path = self.data_dir / AUTH_FILE_NAME
        self._lock = get_document_lock(self.auth_path)

    def _ensure_secure_directory(self):
        """Create the data directory with secure permissions"""
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(self.data_dir, AUTH_DIR_MODE)

    def load(self) -> AuthData:
        """Load the credential document

        Returns:
            Stored AuthData, or an empty document if no file exists yet

        Raises:
            CredentialsStorageError: If the file exists but cannot be read or parsed
        """
        with self._lock.read_lock():
            try:
                raw = self.auth_path.read_bytes()
            except FileNotFoundError:
                return AuthData()
            except OSError as e:
                raise CredentialsStorageError(f"Failed to read auth file {self.auth_path}: {e}") from e

        try:
            return AuthData.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError) as e:
            raise CredentialsStorageError(f"Failed to parse auth data in {self.auth_path}: {e}") from e

    def save(self, auth_data: AuthData):
        """Write the credential document atomically with 0600 permissions

        Args:
            auth_data: Document to persist

        Raises:
            CredentialsStorageError: If the directory or file cannot be written
        """
        payload = json.dumps(auth_data.model_dump(exclude_none=True), indent=2, sort_keys=True)

        with self._lock.write_lock():
            try:
                self._ensure_secure_directory()
                self._atomic_write(payload)
            except OSError as e:
                raise CredentialsStorageError(f"Failed to write auth file {self.auth_path}: {e}") from e

        logger.debug(f"Saved credential document to {self.auth_path}")

    def _atomic_write(self, payload: str):
        tmp_fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=".tmp_", suffix=".json", text=True)
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                f.write(payload)
            # Set file permissions to 600 before the file becomes visible
            if platform.system() != "Windows":
                os.chmod(tmp_path, AUTH_FILE_MODE)
            os.replace(tmp_path, self.auth_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def exists(self) -> bool:
        """Check whether the credential document has been created"""
        return self.auth_path.exists()

    @property
    def token_file(self) -> Path:
        """Get the credential document path"""
        return self.auth_path
