"""Tests for the base_project service and the shared service plumbing."""

from __future__ import annotations

import pytest

from projectboot.config import BaseProjectConfig
from projectboot.errors import IdenticalSourceAndTargetError, InvalidConfigTypeError
from projectboot.scaffolder.base_project import BaseProject


class TestSetConfig:
    @pytest.mark.unit
    def test_wrong_type_is_rejected(self, target_dir, lint_config):
        service = BaseProject(target_dir)
        with pytest.raises(InvalidConfigTypeError, match="base_project"):
            service.set_config(lint_config)
        assert service.cfg is None

    @pytest.mark.unit
    def test_source_equal_to_target_is_rejected(self, target_dir, project_config_data):
        project_config_data["source_path"] = str(target_dir / "." / "")
        cfg = BaseProjectConfig.model_validate(project_config_data)
        with pytest.raises(IdenticalSourceAndTargetError):
            BaseProject(target_dir).set_config(cfg)

    @pytest.mark.unit
    def test_unconfigured_service_cannot_run(self, target_dir):
        with pytest.raises(RuntimeError):
            BaseProject(target_dir).run()


class TestRun:
    @pytest.mark.unit
    def test_scenario_from_small_tree(self, target_dir, write_tree, project_config_data):
        src = write_tree({"cmd/{{ lower_project_name }}/main.go": "package main // {{ project_name }}"})
        project_config_data["source_path"] = str(src)
        service = BaseProject(target_dir)
        service.set_config(BaseProjectConfig.model_validate(project_config_data))

        service.run()

        main_go = target_dir / "Foo" / "cmd" / "foo" / "main.go"
        assert main_go.read_text() == "package main // Foo"

    @pytest.mark.unit
    def test_shipped_skeleton(self, target_dir, project_config):
        service = BaseProject(target_dir)
        service.set_config(project_config)

        service.run()

        out = target_dir / "Foo"
        assert (out / "go.mod").read_text() == "module github.com/acme/foo\n\ngo 1.24.3\n"
        assert "Copyright (c) 2026 Acme Inc." in (out / "LICENSE").read_text()
        assert (out / "cmd" / "foo" / "main.go").is_file()
        assert 'const Name = "Foo"' in (out / "pkg" / "config" / "foo.go").read_text()
        assert "Maintained on github by `acme`." in (out / "README.md").read_text()
        assert not list(out.rglob("*.tmpl"))

    @pytest.mark.unit
    def test_rerun_over_existing_output(self, target_dir, project_config):
        service = BaseProject(target_dir)
        service.set_config(project_config)
        service.run()
        first = (target_dir / "Foo" / "go.mod").read_bytes()

        service.run()

        assert (target_dir / "Foo" / "go.mod").read_bytes() == first

    @pytest.mark.unit
    def test_service_id(self, target_dir):
        assert BaseProject(target_dir).service_id == "base_project"
        assert BaseProject.config_type is BaseProjectConfig
