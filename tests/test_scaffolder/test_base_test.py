"""Tests for the base_test service."""

from __future__ import annotations

import pytest

from projectboot.config import BaseTestConfig
from projectboot.constants import DEFAULT_GO_TEST_CMD
from projectboot.scaffolder.base_test import BaseTest
from projectboot.scaffolder.registry import ScriptRegistry

pytestmark = pytest.mark.unit


def _config(source: str, style: str, **extra) -> BaseTestConfig:
    return BaseTestConfig.model_validate(
        {
            "source_path": source,
            "project_name": "Foo",
            "repo_import_path": "github.com/acme/foo",
            "use_style": style,
            **extra,
        }
    )


class TestRun:
    def test_go_style_skips_suite_files(self, target_dir, base_test_config):
        svc = BaseTest(target_dir)
        svc.set_config(base_test_config)

        svc.run()

        test_dir = target_dir / "Foo" / "test"
        assert sorted(p.name for p in test_dir.iterdir()) == ["foo_test.go"]
        body = (test_dir / "foo_test.go").read_text()
        assert "func TestName(t *testing.T)" in body
        assert "ginkgo" not in body

    def test_ginkgo_style_keeps_suite_files(self, target_dir, base_test_config):
        cfg = _config(base_test_config.source_path, "ginkgo")
        svc = BaseTest(target_dir)
        svc.set_config(cfg)

        svc.run()

        test_dir = target_dir / "Foo" / "test"
        assert sorted(p.name for p in test_dir.iterdir()) == ["foo_suite_test.go", "foo_test.go"]
        assert "func TestFOO(t *testing.T)" in (test_dir / "foo_suite_test.go").read_text()
        assert 'Describe("Foo"' in (test_dir / "foo_test.go").read_text()

    def test_suite_marker_applies_to_rendered_path(self, target_dir, write_tree):
        src = write_tree({"{{ lower_project_name }}_suite_test.go": "suite", "other.go": "o"})
        svc = BaseTest(target_dir)
        svc.set_config(_config(str(src), "go"))

        svc.run()

        assert [p.name for p in (target_dir / "Foo").iterdir()] == ["other.go"]


class TestScripts:
    def test_registers_default_command(self, target_dir, base_test_config):
        registry = ScriptRegistry(["task", "script"])
        svc = BaseTest(target_dir)
        svc.set_config(base_test_config)
        svc.set_script_receiver(registry)

        svc.run()

        assert registry.lines == {"base_test": [DEFAULT_GO_TEST_CMD]}
        assert registry.files == {"test.sh": [DEFAULT_GO_TEST_CMD]}

    def test_registers_configured_command(self, target_dir, write_tree):
        src = write_tree({}, name="tests")
        registry = ScriptRegistry(["make"])
        svc = BaseTest(target_dir)
        svc.set_config(_config(str(src), "go", test_cmd="go test ./..."))
        svc.set_script_receiver(registry)

        svc.run()

        assert registry.lines == {"base_test": ["go test ./..."]}
