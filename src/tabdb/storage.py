"""Storage manager: database directories and table files under one root."""

from __future__ import annotations

import shutil
from pathlib import Path


class StorageManager:
    """Maps database and table names to paths below a root directory.

    Each database is a directory named after it; each table is a
    ``<table>.tab`` file inside its database directory.
    """

    TABLE_SUFFIX = ".tab"

    def __init__(self, root_dir: Path) -> None:
        """Initialize the storage manager.

        Args:
            root_dir: Directory holding one sub-directory per database.
                Created if missing.
        """
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def database_path(self, name: str) -> Path:
        return self.root_dir / name

    def database_exists(self, name: str) -> bool:
        return self.database_path(name).is_dir()

    def create_database(self, name: str) -> Path:
        path = self.database_path(name)
        path.mkdir()
        return path

    def drop_database(self, name: str) -> None:
        shutil.rmtree(self.database_path(name))

    def list_databases(self) -> list[str]:
        return sorted(p.name for p in self.root_dir.iterdir() if p.is_dir())

    def table_path(self, database_dir: Path, table: str) -> Path:
        return database_dir / f"{table}{self.TABLE_SUFFIX}"

    def list_tables(self, database_dir: Path) -> list[str]:
        return sorted(p.stem for p in database_dir.glob(f"*{self.TABLE_SUFFIX}"))
