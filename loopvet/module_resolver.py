"""Import-path resolution for Go packages using go.mod."""

import re
from pathlib import Path

from loopvet.utils.constants import GO_MOD_FILE
from loopvet.utils.logging import logger

_MODULE_LINE = re.compile(r"^\s*module\s+(\"[^\"]+\"|\S+)", re.MULTILINE)


class ModuleResolver:
    """Maps Go source directories to package import paths.

    The nearest go.mod above a file supplies the module path; the package
    path is the module path joined with the directory relative to go.mod.
    Results are cached per directory.
    """

    def __init__(self, project_root: str | Path | None = None):
        if project_root:
            self.project_root = Path(project_root).resolve()
        else:
            self.project_root = Path.cwd()

        self._module_by_dir: dict[Path, tuple[Path, str] | None] = {}

    def package_path(self, file_path: str | Path, package_name: str) -> str:
        """Import path of the package the file belongs to.

        Falls back to the package clause name when no go.mod is found.
        """
        directory = Path(file_path).resolve().parent
        module = self._find_module(directory)
        if module is None:
            return package_name

        mod_dir, mod_path = module
        rel = directory.relative_to(mod_dir).as_posix()
        if rel in ("", "."):
            return mod_path
        return f"{mod_path}/{rel}"

    def _find_module(self, directory: Path) -> tuple[Path, str] | None:
        if directory in self._module_by_dir:
            return self._module_by_dir[directory]

        result = None
        gomod = directory / GO_MOD_FILE
        if gomod.is_file():
            result = self._read_module(gomod)
        elif directory.parent != directory:
            result = self._find_module(directory.parent)

        self._module_by_dir[directory] = result
        return result

    def _read_module(self, gomod: Path) -> tuple[Path, str] | None:
        try:
            text = gomod.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Could not read {gomod}: {e}")
            return None

        match = _MODULE_LINE.search(text)
        if not match:
            logger.debug(f"No module directive in {gomod}")
            return None
        return gomod.parent, match.group(1).strip('"')
