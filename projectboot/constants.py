"""Identifiers, defaults and permissions shared across projectboot."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Service identifiers
# ---------------------------------------------------------------------------

SERVICE_BASE_PROJECT = "base_project"
SERVICE_BASE_LINT = "base_lint"
SERVICE_BASE_LOCAL = "base_local"
SERVICE_BASE_TEST = "base_test"

# ---------------------------------------------------------------------------
# Linters
# ---------------------------------------------------------------------------

LINTER_GO = "golang"
LINTER_YAML = "yaml"
LINTER_MAKE = "make"
LINTER_MD = "markdown"
LINTER_SHELL = "shellcheck"
LINTER_SHFMT = "shfmt"

# ``{{DOCKER_RUN}}`` and ``{{SH_FILES}}`` are literal markers that the local
# script templates substitute with ``replace``.
DEFAULT_LINT_CMDS: dict[str, str] = {
    LINTER_GO: "{{DOCKER_RUN}} golangci/golangci-lint:v2.7.1 golangci-lint run ./...",
    LINTER_YAML: "{{DOCKER_RUN}} pipelinecomponents/yamllint:0.35.9 yamllint .",
    LINTER_MAKE: "{{DOCKER_RUN}} cytopia/checkmake:latest-0.5 Makefile",
    LINTER_MD: '{{DOCKER_RUN}} ghcr.io/igorshubovych/markdownlint-cli:v0.46.0 markdownlint "**/*.md"',
    LINTER_SHELL: "{{DOCKER_RUN}} cytopia/shellcheck:latest-0.8.0 shellcheck {{SH_FILES}}",
    LINTER_SHFMT: "{{DOCKER_RUN}} cytopia/shfmt:latest-1.10 shfmt -d {{SH_FILES}}",
}

# Linter name -> config file copied from the lint template directory.
# Linters listed with ``None`` are known but configured through flags only.
LINT_CONFIG_FILES: dict[str, str | None] = {
    LINTER_GO: ".golangci.yml",
    LINTER_YAML: ".yamllint.yml",
    LINTER_MAKE: None,
    LINTER_MD: ".markdownlint.yml",
    LINTER_SHELL: None,
    LINTER_SHFMT: None,
}

# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

DEFAULT_GO_TEST_CMD = (
    "go test -race -timeout=5m -coverprofile=coverage.txt ./... "
    "&& go tool cover -func=coverage.txt; rm -f coverage.txt"
)

TEST_STYLE_GINKGO = "ginkgo"
TEST_STYLE_GO = "go"
TEST_STYLES = (TEST_STYLE_GINKGO, TEST_STYLE_GO)

# Rendered paths containing this marker only exist for the ginkgo style.
SUITE_FILE_MARKER = "suite_test.go"

# ---------------------------------------------------------------------------
# Local scripts
# ---------------------------------------------------------------------------

SCRIPT_CHANNEL_MAKE = "make"
SCRIPT_CHANNEL_TASK = "task"
SCRIPT_CHANNEL_COMMIT = "commit"
SCRIPT_CHANNEL_SCRIPT = "script"
SCRIPT_CHANNELS = (
    SCRIPT_CHANNEL_MAKE,
    SCRIPT_CHANNEL_TASK,
    SCRIPT_CHANNEL_COMMIT,
    SCRIPT_CHANNEL_SCRIPT,
)

# Channel -> file rendered into the project root.
SCRIPT_CHANNEL_FILES: dict[str, str] = {
    SCRIPT_CHANNEL_MAKE: "Makefile",
    SCRIPT_CHANNEL_TASK: "Taskfile.yml",
    SCRIPT_CHANNEL_COMMIT: ".pre-commit-config.yaml",
}

SCRIPT_DIR = "scripts"
SCRIPT_FILE_LINT = "lint.sh"
SCRIPT_FILE_TEST = "test.sh"

# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------

DIR_PERM = 0o755
FILE_PERM = 0o644
SCRIPT_PERM = 0o755

TEMPLATE_SUFFIX = ".tmpl"
