"""
Discovery — Locate a project in a directory and load its files

A directory is a project when it holds a `cue.mod/` directory. The
module name comes from `cue.mod/module.cue` (`module: "name"`) and
falls back to the directory name. Every `*.cue` file directly in the
directory is loaded, in name order.

Outside a project the session runs in freestyle mode with an empty
program.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..errors import LoadError
from ..lang import ast
from ..lang.evaluator import build
from ..lang.parser import parse_file
from ..lang.values import Scalar
from .program import Program, SourceFile


MODULE_DIR = "cue.mod"
MODULE_FILE = "module.cue"
SOURCE_SUFFIX = ".cue"


@dataclass
class Project:
    """A discovered project: root directory, module name and source files."""
    root: Path
    module: str
    files: List[Path] = field(default_factory=list)


def read_source(path: Path) -> str:
    """Read a source file, turning OS and decoding failures into LoadError."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise LoadError(f"{path}: no such file")
    except IsADirectoryError:
        raise LoadError(f"{path}: is a directory")
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"{path}: {e}")


def source_files(directory: Path) -> List[Path]:
    """The `*.cue` files directly inside directory, sorted by name."""
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix == SOURCE_SUFFIX
    )


def parse_sources(paths: List[Path], base: Optional[Path] = None) -> List[ast.File]:
    """Parse every path before returning, so a failure adds nothing."""
    parsed = []
    for path in paths:
        name = str(path.relative_to(base)) if base and path.is_relative_to(base) else str(path)
        parsed.append(parse_file(name, read_source(path)))
    return parsed


def _module_name(root: Path) -> str:
    module_file = root / MODULE_DIR / MODULE_FILE
    if not module_file.is_file():
        return root.name
    parsed = parse_file(str(module_file.relative_to(root)), read_source(module_file))
    value = build([parsed]).value.lookup(["module"])
    if isinstance(value, Scalar) and value.kind == "string" and value.value:
        return value.value
    return root.name


def find_project(directory: Path) -> Optional[Project]:
    """Return the project rooted at directory, or None in freestyle mode."""
    root = Path(directory).resolve()
    if not (root / MODULE_DIR).is_dir():
        return None
    return Project(root=root, module=_module_name(root), files=source_files(root))


def discover_project(directory: Path) -> Optional[Program]:
    """
    Build the initial program for a project directory.

    Returns:
        Program holding every project file, or None when directory is not a project

    Raises:
        LoadError: a project file cannot be read
        ParseError: a project file does not parse
    """
    project = find_project(directory)
    if project is None:
        return None
    parsed = parse_sources(project.files, base=project.root)
    return Program(files=[SourceFile.from_ast(p) for p in parsed], module=project.module)
