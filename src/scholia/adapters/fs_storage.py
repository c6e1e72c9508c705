import os
import tempfile
from pathlib import Path

from ..core.ports import BlobStorage


class FsBlobStorage(BlobStorage):
    def __init__(self, root: Path):
        self.root = root

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def read_raw(self, key: str) -> str | None:
        p = self._path(key)
        return p.read_text(encoding="utf-8") if p.exists() else None

    def write_raw(self, key: str, contents: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        # temp file + replace so a crash never leaves a half-written blob
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(contents)
            os.replace(tmp, self._path(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class MemoryBlobStorage(BlobStorage):
    def __init__(self, initial: dict[str, str] | None = None):
        self.blobs = dict(initial or {})

    def read_raw(self, key: str) -> str | None:
        return self.blobs.get(key)

    def write_raw(self, key: str, contents: str) -> None:
        self.blobs[key] = contents
