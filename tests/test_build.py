"""
Tests for the file-system build context.
"""

import pytest

pytestmark = pytest.mark.integration

from ngreflector.build import BuildContext
from ngreflector.config import ResolverConfig
from ngreflector.reflector import ReflectableReader
from ngreflector.schemas import Directive, ResolvedLibrary


@pytest.fixture
def project(tmp_path):
    (tmp_path / "lib" / "src").mkdir(parents=True)
    (tmp_path / "lib" / "app.dart").write_text("")
    (tmp_path / "lib" / "src" / "service.dart").write_text("")
    (tmp_path / "lib" / "src" / "model.dart").write_text("")
    (tmp_path / "lib" / "src" / "model.template.dart").write_text("")
    (tmp_path / "lib" / "notes.txt").write_text("")
    return tmp_path


class TestBuildContext:

    def test_from_directory(self, project):
        context = BuildContext.from_directory(project)

        assert context.inputs == {"lib/app.dart", "lib/src/service.dart", "lib/src/model.dart"}
        assert context.libraries == {"lib/src/model.template.dart"}

    def test_relative_to_library(self, project):
        context = BuildContext.from_directory(project).for_library("lib/app.dart")

        assert context.has_input("src/service.dart")
        assert context.is_library("src/model.template.dart")
        assert not context.has_input("src/missing.dart")
        assert not context.is_library("src/service.template.dart")

    def test_parent_relative(self, project):
        context = BuildContext.from_directory(project).for_library("lib/src/service.dart")

        assert context.has_input("../app.dart")

    def test_scheme_uris_are_not_inputs(self, project):
        context = BuildContext.from_directory(project)

        assert not context.has_input("dart:async")
        assert not context.has_input("package:app/app.dart")
        assert not context.is_library("package:app/app.template.dart")

    def test_memoized(self, project):
        context = BuildContext(project, inputs=["a.dart"])

        assert context.has_input("a.dart")
        context.inputs.clear()
        assert context.has_input("a.dart")


class TestResolveAgainstDirectory:

    @pytest.mark.asyncio
    async def test_links_inputs_and_libraries(self, project):
        context = BuildContext.from_directory(project).for_library("lib/app.dart")
        reader = ReflectableReader(ResolverConfig(has_input=context.has_input, is_library=context.is_library))
        library = ResolvedLibrary(uri="lib/app.dart", directives=(
            Directive(kind="import", uri="src/service.dart"),
            Directive(kind="import", uri="src/model.dart"),
            Directive(kind="import", uri="src/missing.dart"),
            Directive(kind="import", uri="dart:async"),
        ))

        output = await reader.resolve(library)

        assert output.urls_needing_init_reflector == ("src/model.template.dart", "src/service.template.dart")
