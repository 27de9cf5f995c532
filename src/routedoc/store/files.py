from __future__ import annotations

from pathlib import Path
from typing import Optional


class DocumentStore:
    """Output-directory store for the published document, its snapshot and the collection.

    Layout under ``output_path``:
    - source/index.md      published document (may be hand-edited)
    - source/.compare.md   last unedited rendering, used to spot hand edits
    - collection.json      Postman collection

    Reads and writes are whole-file. Errors are not swallowed: merging
    against a half-read previous state would lose edits.
    """

    def __init__(self, output_path: Path):
        self.output_path = output_path

    @staticmethod
    def source_dir_for(output_path: Path) -> Path:
        return output_path / "source"

    @property
    def document_path(self) -> Path:
        return self.source_dir_for(self.output_path) / "index.md"

    @property
    def snapshot_path(self) -> Path:
        return self.source_dir_for(self.output_path) / ".compare.md"

    @property
    def collection_path(self) -> Path:
        return self.output_path / "collection.json"

    # ----------------------------
    # reads
    # ----------------------------

    def read_published(self) -> Optional[str]:
        return self._read(self.document_path)

    def read_snapshot(self) -> Optional[str]:
        return self._read(self.snapshot_path)

    # ----------------------------
    # writes
    # ----------------------------

    def write_published(self, text: str) -> Path:
        return self._write(self.document_path, text)

    def write_snapshot(self, text: str) -> Path:
        return self._write(self.snapshot_path, text)

    def write_collection(self, text: str) -> Path:
        return self._write(self.collection_path, text)

    # ----------------------------
    # internal helpers
    # ----------------------------

    def _read(self, path: Path) -> Optional[str]:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
