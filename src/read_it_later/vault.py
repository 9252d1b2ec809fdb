"""Note storage."""

import re
import unicodedata
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from .parsers.base import NOTE_EXTENSION, Note

log = structlog.get_logger()

# Characters not allowed in note filenames
ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|#^\[\]]')

# Maximum filename length, extension included
MAX_FILENAME_LENGTH = 200


@runtime_checkable
class VaultRepository(Protocol):
    """Storage capability notes are persisted through."""

    def save_note(self, note: Note) -> Path: ...

    def append_to_existing_note(self, note: Note) -> Path: ...

    def create_directory(self, path: str) -> None: ...

    def exists(self, path: str) -> bool: ...

    def get_file_by_path(self, path: str) -> Path | None: ...


def normalize_filename(filename: str) -> str:
    """Make a note filename safe to use as a single path segment.

    Args:
        filename: Rendered filename, usually ending in ``.md``.

    Returns:
        The cleaned filename, or ``Untitled.md`` if nothing usable is left.
    """
    stem = filename[: -len(NOTE_EXTENSION)] if filename.endswith(NOTE_EXTENSION) else filename

    stem = unicodedata.normalize("NFC", stem)
    stem = ILLEGAL_FILENAME_CHARS.sub("", stem)
    stem = re.sub(r"\s+", " ", stem).strip(" .")
    stem = stem[: MAX_FILENAME_LENGTH - len(NOTE_EXTENSION)].rstrip(" .")

    return f"{stem or 'Untitled'}{NOTE_EXTENSION}"


class FileVaultRepository:
    """Vault stored as plain Markdown files on disk."""

    def __init__(self, root: Path, inbox_dir: str = "") -> None:
        """Initialize the repository.

        Args:
            root: Vault root directory.
            inbox_dir: Vault-relative folder new notes are written to.
        """
        self._root = Path(root)
        self._inbox_dir = inbox_dir.strip("/")

    @property
    def root(self) -> Path:
        return self._root

    def save_note(self, note: Note) -> Path:
        """Write a new note into the inbox.

        Raises:
            FileExistsError: If a note with the same name already exists.
        """
        self.create_directory(self._inbox_dir)
        path = self._note_path(note)
        if path.exists():
            raise FileExistsError(f"{path.name} already exists")

        path.write_text(note.content, encoding="utf-8")
        log.info("note_saved", path=str(path), size=len(note.content))
        return path

    def append_to_existing_note(self, note: Note) -> Path:
        """Append to the note with the same name, creating it if needed."""
        self.create_directory(self._inbox_dir)
        path = self._note_path(note)
        if not path.exists():
            path.write_text(note.content, encoding="utf-8")
            log.info("note_saved", path=str(path), size=len(note.content))
            return path

        with path.open("a", encoding="utf-8") as f:
            f.write(f"\n\n{note.content}")
        log.info("note_appended", path=str(path), size=len(note.content))
        return path

    def create_directory(self, path: str) -> None:
        directory = self._resolve(path)
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            log.info("vault_directory_created", path=str(directory))

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def get_file_by_path(self, path: str) -> Path | None:
        file_path = self._resolve(path)
        return file_path if file_path.is_file() else None

    def _note_path(self, note: Note) -> Path:
        return self._resolve(self._inbox_dir) / normalize_filename(note.filename)

    def _resolve(self, path: str) -> Path:
        """Resolve a vault-relative path, refusing paths that escape the vault."""
        root = self._root.resolve()
        resolved = (root / path.strip("/")).resolve()
        if resolved != root and root not in resolved.parents:
            raise ValueError(f"Path {path!r} is outside the vault")
        return resolved
