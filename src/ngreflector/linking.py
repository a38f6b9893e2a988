"""
Decides which generated files of other libraries an `initReflector` links to.

Linking means importing a dependency's generated file and calling its
`initReflector` from ours, so one entry point initializes the whole graph.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, List, Union

from ngreflector.exceptions import MalformedUriError
from ngreflector.logging_config import logger
from ngreflector.schemas import Directive, ResolvedLibrary

HasInput = Callable[[str], Union[bool, Awaitable[bool]]]
IsLibrary = Callable[[str], bool]

# Platform libraries never have generated files.
BUILTIN_SCHEME = "dart:"


def with_output_extension(uri: str, output_extension: str) -> str:
    """Replaces the last extension of `uri` with `output_extension`."""
    extension_at = uri.rfind(".")
    if extension_at < 0 or "/" in uri[extension_at:]:
        raise MalformedUriError(uri)
    return uri[:extension_at] + output_extension


class LinkingAnalyzer:
    """
    Determines, per directive, whether the generated file of its target exists
    or will exist in this build.
    """

    def __init__(self, has_input: HasInput, is_library: IsLibrary, output_extension: str):
        self.has_input = has_input
        self.is_library = is_library
        self.output_extension = output_extension

    async def resolve_urls(self, library: ResolvedLibrary) -> List[str]:
        """
        Returns the sorted, de-duplicated generated file URIs to link to.

        All directives are checked concurrently; if any check fails the rest
        are cancelled and the error propagates.
        """
        directives = library.directives
        tasks = [asyncio.create_task(self.needs_init_reflector(d)) for d in directives]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        urls = set()
        for directive, linked in zip(directives, results):
            if not linked:
                continue
            uri = directive.uri
            # Always link to the generated equivalent of a file.
            if not uri.endswith(self.output_extension):
                uri = with_output_extension(uri, self.output_extension)
            urls.add(uri)

        linked_urls = sorted(urls)
        if linked_urls:
            logger.debug(f"{library.uri or '<library>'} links to {linked_urls}")
        return linked_urls

    async def needs_init_reflector(self, directive: Directive) -> bool:
        """Whether `initReflector` needs to link to the target of `directive`."""
        if directive.kind == "import":
            # Linking would force deferred code to load eagerly.
            if directive.deferred:
                logger.debug(f"Not linking deferred import '{directive.uri}'")
                return False
            # Manually imported generated files are always linked.
            if directive.uri is not None and directive.uri.endswith(self.output_extension):
                return True
        if not directive.is_uri_based:
            return False

        uri = directive.uri
        if uri.startswith(BUILTIN_SCHEME):
            return False
        output_uri = with_output_extension(uri, self.output_extension)
        # Depending on build order, the generated file is either already an
        # analyzed library or still forthcoming from a build input.
        if self.is_library(output_uri):
            return True
        return await self._has_input(uri)

    async def _has_input(self, uri: str) -> bool:
        result = self.has_input(uri)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)
