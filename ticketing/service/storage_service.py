import logging
import os

logger = logging.getLogger(__name__)


class LocalStorage:
    """Stores binaries on the local filesystem and serves them under a public base URL."""

    def __init__(self, base_path: str, base_url: str):
        self.base_path = base_path
        self.base_url = base_url.rstrip("/")

    def save_file(self, data: bytes, directory: str, filename: str) -> str:
        full_dir = os.path.join(self.base_path, directory)
        os.makedirs(full_dir, mode=0o755, exist_ok=True)

        relative_path = f"{directory.strip('/')}/{filename}"
        with open(os.path.join(self.base_path, relative_path), "wb") as handle:
            handle.write(data)

        logger.debug(f"Stored {len(data)} bytes at {relative_path}")
        return relative_path

    def delete_file(self, storage_path: str):
        full_path = os.path.join(self.base_path, storage_path)
        if os.path.exists(full_path):
            os.remove(full_path)

    def file_url(self, storage_path: str) -> str:
        return f"{self.base_url}/{storage_path}"
