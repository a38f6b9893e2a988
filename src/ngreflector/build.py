"""
File-system backed build context.

Provides the `has_input` / `is_library` collaborators for resolving a library
outside of a full build system: inputs are the source files of a directory
tree, libraries are the generated files already present in it.
"""

import posixpath
from pathlib import Path
from typing import Dict, Iterable, Optional, Set

from ngreflector.config import DEFAULT_OUTPUT_EXTENSION
from ngreflector.linking import BUILTIN_SCHEME
from ngreflector.logging_config import logger


class BuildContext:
    """
    Answers existence queries for URIs relative to one library.

    Paths are kept relative to `root`, POSIX-style. Answers are memoized per
    URI for the lifetime of the context.
    """

    def __init__(
        self,
        root: Path,
        inputs: Iterable[str] = (),
        libraries: Iterable[str] = (),
        library_dir: str = "",
    ):
        self.root = Path(root)
        self.inputs: Set[str] = {posixpath.normpath(p) for p in inputs}
        self.libraries: Set[str] = {posixpath.normpath(p) for p in libraries}
        self.library_dir = library_dir
        self._input_cache: Dict[str, bool] = {}
        self._library_cache: Dict[str, bool] = {}

    @classmethod
    def from_directory(
        cls,
        root: Path,
        source_suffix: str = ".dart",
        output_extension: str = DEFAULT_OUTPUT_EXTENSION,
        library_dir: str = "",
    ) -> "BuildContext":
        """
        Scan `root` for sources and generated files.

        Every file ending in `source_suffix` that is not itself generated is a
        build input; every generated file is an analyzed library.
        """
        root = Path(root)
        inputs = []
        libraries = []
        for path in sorted(root.rglob(f"*{source_suffix}")):
            if not path.is_file():
                continue
            relative = path.relative_to(root).as_posix()
            if relative.endswith(output_extension):
                libraries.append(relative)
            else:
                inputs.append(relative)
        logger.debug(f"Build context {root}: {len(inputs)} inputs, {len(libraries)} libraries")
        return cls(root, inputs=inputs, libraries=libraries, library_dir=library_dir)

    def for_library(self, library_path: str) -> "BuildContext":
        """A context resolving relative URIs against the directory of `library_path`."""
        return BuildContext(
            self.root,
            inputs=self.inputs,
            libraries=self.libraries,
            library_dir=posixpath.dirname(library_path),
        )

    def _to_path(self, uri: str) -> Optional[str]:
        # Only relative file URIs map into this context.
        if uri.startswith(BUILTIN_SCHEME) or ":" in uri:
            return None
        return posixpath.normpath(posixpath.join(self.library_dir, uri))

    def has_input(self, uri: str) -> bool:
        if uri not in self._input_cache:
            path = self._to_path(uri)
            self._input_cache[uri] = path is not None and path in self.inputs
        return self._input_cache[uri]

    def is_library(self, uri: str) -> bool:
        if uri not in self._library_cache:
            path = self._to_path(uri)
            self._library_cache[uri] = path is not None and path in self.libraries
        return self._library_cache[uri]
