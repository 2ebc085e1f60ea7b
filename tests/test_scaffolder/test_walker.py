"""Tests for the two-pass tree walker."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from projectboot.errors import PathEscapeError, TemplateExecutionError, TemplateParseError
from projectboot.scaffolder.walker import TreeWalker

pytestmark = pytest.mark.unit


class _Context(BaseModel):
    project_name: str = "Foo"
    lower_project_name: str = "foo"


@pytest.fixture
def walker() -> TreeWalker:
    return TreeWalker()


class TestMaterialize:
    def test_renders_paths_and_contents(self, walker, write_tree, output_root):
        src = write_tree({"cmd/{{ lower_project_name }}/main.go": "package main // {{ project_name }}"})

        walker.materialize(src, output_root, _Context())

        main_go = output_root.path / "cmd" / "foo" / "main.go"
        assert main_go.read_text() == "package main // Foo"

    def test_strips_template_suffix(self, walker, write_tree, output_root):
        src = write_tree({"go.mod.tmpl": "module {{ lower_project_name }}\n"})

        written = walker.materialize(src, output_root, _Context())

        assert written == ["go.mod"]
        assert (output_root.path / "go.mod").read_text() == "module foo\n"
        assert not (output_root.path / "go.mod.tmpl").exists()

    def test_empty_directories_are_created(self, walker, write_tree, output_root):
        src = write_tree({"docs/{{ lower_project_name }}/": ""})

        walker.materialize(src, output_root, _Context())

        assert (output_root.path / "docs" / "foo").is_dir()

    def test_skip_prunes_files_and_subtrees(self, walker, write_tree, output_root):
        src = write_tree(
            {
                "keep.txt": "k",
                "test/foo_suite_test.go": "suite",
                "test/foo_test.go": "t",
                "vendor/deep/file.txt": "v",
            }
        )

        walker.materialize(
            src,
            output_root,
            _Context(),
            skip=lambda path: "suite_test.go" in path or path == "vendor",
        )

        assert (output_root.path / "keep.txt").exists()
        assert (output_root.path / "test" / "foo_test.go").exists()
        assert not (output_root.path / "test" / "foo_suite_test.go").exists()
        assert not (output_root.path / "vendor").exists()

    def test_bad_directory_name_aborts_before_subtree(self, walker, write_tree, output_root):
        src = write_tree({"a.txt": "a", "{{ name/inner.txt": "x"})

        with pytest.raises(TemplateParseError, match="failed to render path"):
            walker.materialize(src, output_root, _Context())

        assert not (output_root.path / "inner.txt").exists()
        assert [p.name for p in output_root.path.iterdir()] == ["a.txt"]

    def test_bad_content_aborts_pass_two(self, walker, write_tree, output_root):
        src = write_tree({"a.txt": "{{ project_name }}", "b.txt": "{{ unknown }}"})

        with pytest.raises(TemplateExecutionError, match="b.txt"):
            walker.materialize(src, output_root, _Context())

        # No rollback: the file before the failure is already rendered.
        assert (output_root.path / "a.txt").read_text() == "Foo"

    def test_rendered_path_cannot_escape(self, walker, write_tree, output_root):
        src = write_tree({"{{ up }}.txt": "x"})

        with pytest.raises(PathEscapeError):
            walker.materialize(src, output_root, {"up": "../evil"})

        assert not (output_root.path.parent / "evil.txt").exists()

    def test_pass_two_covers_whole_root(self, walker, write_tree, output_root):
        output_root.write_bytes("earlier.txt", b"{{ project_name }} was here")
        src = write_tree({"new.txt": "{{ lower_project_name }}"})

        walker.materialize(src, output_root, _Context())

        assert (output_root.path / "earlier.txt").read_text() == "Foo was here"

    def test_binary_files_are_copied_verbatim(self, walker, write_tree, output_root):
        src = write_tree({"README.md": "# {{ project_name }}\n"})
        logo = b"\x89PNG\r\n\x1a\n\xff\xfe\x00"
        (src / "assets").mkdir()
        (src / "assets" / "logo.png").write_bytes(logo)

        walker.materialize(src, output_root, _Context())

        assert (output_root.path / "assets" / "logo.png").read_bytes() == logo
        assert (output_root.path / "README.md").read_text() == "# Foo\n"

    def test_crlf_files_keep_their_line_endings(self, walker, write_tree, output_root):
        src = write_tree({"build.cmd.tmpl": "rem {{ project_name }}\r\nexit /b 0\r\n"})

        walker.materialize(src, output_root, _Context())

        assert (output_root.path / "build.cmd").read_bytes() == b"rem Foo\r\nexit /b 0\r\n"

    def test_output_is_deterministic(self, walker, write_tree, target_dir):
        from projectboot.scaffolder.root import OutputRoot

        src = write_tree({"x/{{ lower_project_name }}.txt": "{{ project_name }}", "y.txt": "y"})
        contents = []
        for name in ("one", "two"):
            with OutputRoot.open(target_dir, name) as root:
                walker.materialize(src, root, _Context())
                contents.append(
                    [(rel, is_dir, None if is_dir else root.read_bytes(rel)) for rel, is_dir in root.walk()]
                )
        assert contents[0] == contents[1]
