"""Write generated DDL statements to per-object script files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Tuple, Union

from db_meta_tool.infrastructure.schema import ScriptCategory
from db_meta_tool.utils.logging import get_logger

logger = get_logger(__name__)

SCRIPT_SUFFIX = ".sql"


class ScriptWriter:
    """
    Persist DDL text as ``<root>/<category>/<object name>.sql`` (UTF-8).

    Usage:
        writer = ScriptWriter(Path("out"))
        writer.write(ScriptCategory.TABLES, "CUSTOMERS", ddl)
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def category_dir(self, category: ScriptCategory) -> Path:
        return self.root / category.value

    def write(self, category: ScriptCategory, name: str, ddl: str) -> Path:
        """Write one statement, replacing any existing file for the object."""
        directory = self.category_dir(category)
        directory.mkdir(parents=True, exist_ok=True)

        path = directory / f"{name}{SCRIPT_SUFFIX}"
        # newline="" keeps "\n" line endings on every platform
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(ddl)

        logger.debug("scripts.written", category=category.value, script=path.name)
        return path

    def write_all(
        self, category: ScriptCategory, statements: Iterable[Tuple[str, str]]
    ) -> List[Path]:
        """Write ``(name, ddl)`` pairs; the category directory is created even if empty."""
        self.category_dir(category).mkdir(parents=True, exist_ok=True)
        return [self.write(category, name, ddl) for name, ddl in statements]
