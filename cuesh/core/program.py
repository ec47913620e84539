"""
Program — The accumulated configuration source of a session

A Program is an ordered list of source files. Typed statements all land
in the first file; injected files and project files are kept as separate
files. Declarations keep insertion order because later declarations
unify with earlier ones in that order.

merge_fragment() is the only place multi-statement accumulation happens.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..lang import ast
from ..lang.format import render_source
from ..lang.parser import parse_file


@dataclass
class SourceFile:
    """One file of a program: declarations, imports and unresolved markers."""
    name: str
    decls: List[ast.Field] = field(default_factory=list)
    imports: List[ast.ImportSpec] = field(default_factory=list)
    unresolved: List[ast.Ident] = field(default_factory=list)

    @classmethod
    def from_ast(cls, parsed: ast.File) -> "SourceFile":
        return cls(
            name=parsed.name,
            decls=list(parsed.decls),
            imports=list(parsed.imports),
            unresolved=list(parsed.unresolved),
        )

    def merge_fragment(self, fragment: ast.File) -> None:
        """
        Splice a parsed fragment onto the end of this file.

        Declarations, imports and unresolved markers are appended in order;
        nothing already in the file moves. The fragment must already be
        parsed, so this cannot fail half way.
        """
        self.decls.extend(fragment.decls)
        self.imports.extend(fragment.imports)
        self.unresolved.extend(fragment.unresolved)

    def copy(self) -> "SourceFile":
        # AST nodes are frozen; copying the lists is enough
        return SourceFile(
            name=self.name,
            decls=list(self.decls),
            imports=list(self.imports),
            unresolved=list(self.unresolved),
        )

    def source(self) -> str:
        return render_source(self.decls, self.imports)


@dataclass
class Program:
    """Ordered source files plus the module they came from, if any."""
    files: List[SourceFile] = field(default_factory=list)
    module: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.files

    @property
    def primary(self) -> Optional[SourceFile]:
        return self.files[0] if self.files else None

    def declarations(self) -> List[ast.Field]:
        """All declarations, file by file, in order."""
        return [decl for f in self.files for decl in f.decls]

    def add_file(self, name: str, text: str) -> SourceFile:
        """Parse text as a whole file and append it. ParseError leaves the program unchanged."""
        source = SourceFile.from_ast(parse_file(name, text))
        self.files.append(source)
        return source

    def append(self, text: str, name: str = "repl") -> None:
        """
        Add statement text to the program.

        The first addition to an empty program becomes its first file.
        Later additions are parsed as a fragment and merged into the
        first file. Parsing happens before any mutation.

        Raises:
            ParseError: text is not a valid declaration list
        """
        if self.is_empty:
            self.add_file(name, text)
            return
        fragment = parse_file(self.files[0].name, text)
        self.files[0].merge_fragment(fragment)

    def copy(self) -> "Program":
        return Program(files=[f.copy() for f in self.files], module=self.module)

    def source(self) -> str:
        """Canonical text of every file, in order."""
        return "\n".join(f"// {f.name}\n{f.source()}" for f in self.files)
