"""In-memory ZIP assembly."""

from __future__ import annotations

import io
import zipfile

from DownGit.errors import ArchiveClosedError

# Fixed timestamp so the same entries always produce the same bytes
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
_FILE_MODE = 0o100644 << 16
_DIR_MODE = (0o040755 << 16) | 0x10  # 0x10 = MS-DOS directory flag


def normalize_zip_path(path: str) -> str:
    """Return *path* as a relative, ``/``-separated archive path."""
    parts = [p for p in path.replace("\\", "/").split("/") if p]
    if not parts:
        raise ValueError(f"Invalid archive path: {path!r}")
    return "/".join(parts)


class ArchiveWriter:
    """Accumulates files and empty-directory markers for one ZIP archive.

    Entries are written in insertion order. A directory marker is only
    emitted when nothing else in the archive lives beneath it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, bytes | None] = {}
        self._built = False

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: str) -> bool:
        return normalize_zip_path(path) in self._entries

    def _check_open(self) -> None:
        if self._built:
            raise ArchiveClosedError("Archive has already been built.")

    def add_file(self, path: str, data: bytes | str) -> None:
        self._check_open()
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._entries[normalize_zip_path(path)] = data

    def add_empty_directory(self, path: str) -> None:
        self._check_open()
        self._entries.setdefault(normalize_zip_path(path), None)

    def names(self) -> list[str]:
        """Return the archive member names :meth:`build` would write."""
        parents = set()
        for path in self._entries:
            parts = path.split("/")[:-1]
            for i in range(1, len(parts) + 1):
                parents.add("/".join(parts[:i]))

        names: list[str] = []
        for path, data in self._entries.items():
            if data is not None:
                names.append(path)
            elif path not in parents:
                names.append(path + "/")
        return names

    def build(self) -> bytes:
        """Serialize every entry into a ZIP archive and close the writer."""
        self._check_open()
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for name in self.names():
                info = zipfile.ZipInfo(name, date_time=_ZIP_EPOCH)
                if name.endswith("/"):
                    info.external_attr = _DIR_MODE
                    zf.writestr(info, b"")
                else:
                    info.external_attr = _FILE_MODE
                    info.compress_type = zipfile.ZIP_DEFLATED
                    zf.writestr(info, self._entries[name])
        self._built = True
        self._entries.clear()
        return buffer.getvalue()
