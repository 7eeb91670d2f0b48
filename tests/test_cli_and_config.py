"""
Tests for the command line entry point and configuration loading.
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ngimport.cli import main
from ngimport.config.settings import DEFAULT_SETTINGS, load_settings
from ngimport.services.config_service import ConfigService

MODULE_TEXT = (
    "import { NgModule } from '@angular/core';\n"
    "\n"
    "@NgModule({\n"
    "  imports: [CommonModule]\n"
    "})\n"
    "export class CoreModule {}\n"
)


@pytest.fixture
def workspace(tmp_path):
    module = tmp_path / "src" / "app" / "core" / "core.module.ts"
    module.parent.mkdir(parents=True)
    module.write_text(MODULE_TEXT, encoding="utf-8")
    return tmp_path


def _args(workspace, *extra):
    return [
        "--dir", str(workspace),
        "--module", "src/app/core/core.module.ts",
        "--import", "HttpClientModule",
        "--from", "@angular/common/http",
        *extra,
    ]


def test_cli_updates_module_file(workspace):
    assert main(_args(workspace)) == 0
    content = (workspace / "src/app/core/core.module.ts").read_text(encoding="utf-8")
    assert "import { HttpClientModule } from '@angular/common/http';" in content
    assert "imports: [CommonModule,\n    HttpClientModule]" in content


def test_cli_second_run_is_noop(workspace):
    assert main(_args(workspace)) == 0
    first = (workspace / "src/app/core/core.module.ts").read_text(encoding="utf-8")
    assert main(_args(workspace)) == 0
    assert (workspace / "src/app/core/core.module.ts").read_text(encoding="utf-8") == first


def test_cli_dry_run_prints_diff(workspace, capsys):
    assert main(_args(workspace, "--dry-run")) == 0
    out = capsys.readouterr().out
    assert "+import { HttpClientModule } from '@angular/common/http';" in out
    assert (workspace / "src/app/core/core.module.ts").read_text(encoding="utf-8") == MODULE_TEXT


def test_cli_missing_module_fails(tmp_path, caplog):
    code = main([
        "--dir", str(tmp_path),
        "--module", "src/missing.module.ts",
        "--import", "A",
        "--from", "a",
    ])
    assert code == 1
    assert "does not exist" in caplog.text


def test_cli_reads_workspace_config(workspace):
    (workspace / ".ngimport.json").write_text(
        json.dumps({"schematic": {"entry_indent": "\t"}}), encoding="utf-8"
    )
    assert main(_args(workspace)) == 0
    content = (workspace / "src/app/core/core.module.ts").read_text(encoding="utf-8")
    assert "imports: [CommonModule,\n\tHttpClientModule]" in content


def test_cli_invalid_config_fails(workspace):
    bad = workspace / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(_args(workspace, "--config", str(bad))) == 1


def test_load_settings_defaults_when_missing(tmp_path):
    assert load_settings(tmp_path / "nope.json") == DEFAULT_SETTINGS


def test_load_settings_overrides_and_ignores_unknown(tmp_path, caplog):
    path = tmp_path / "cfg.json"
    path.write_text(
        json.dumps({"schematic": {"decorator_name": "Component", "colour": "red"}}),
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.decorator_name == "Component"
    assert settings.property_name == "imports"
    assert "colour" in caplog.text


def test_load_settings_rejects_non_string(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"schematic": {"quote": 1}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)


def test_config_service_dot_lookup(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"schematic": {"quote": '"'}}), encoding="utf-8")
    service = ConfigService(path)
    service.load()
    assert service.get("schematic.quote") == '"'
    assert service.get("schematic.missing", "x") == "x"


@pytest.mark.parametrize(
    "module",
    ["ngimport.cli", "ngimport.services", "ngimport.config.settings", "ngimport.core.schematic"],
)
def test_modules_import_in_fresh_interpreter(module):
    root = Path(__file__).parent.parent
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=str(root),
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr


def test_cli_invalid_utf8_module_fails(tmp_path, caplog):
    module = tmp_path / "app.module.ts"
    module.write_bytes(b"import { A } from 'a';\n// \xff\n@NgModule({ imports: [A] })\nclass M {}\n")
    code = main(["--dir", str(tmp_path), "--module", "app.module.ts", "--import", "B", "--from", "b"])
    assert code == 1
    assert "not valid UTF-8" in caplog.text


def test_cli_accepts_absolute_module_path_inside_workspace(workspace):
    module = workspace / "src" / "app" / "core" / "core.module.ts"
    code = main([
        "--dir", str(workspace),
        "--module", str(module),
        "--import", "HttpClientModule",
        "--from", "@angular/common/http",
    ])
    assert code == 0
    assert "HttpClientModule]" in module.read_text(encoding="utf-8")


def test_cli_rejects_absolute_module_path_outside_workspace(workspace, tmp_path_factory, caplog):
    outside = tmp_path_factory.mktemp("outside") / "x.module.ts"
    outside.write_text(MODULE_TEXT, encoding="utf-8")
    code = main(["--dir", str(workspace), "--module", str(outside), "--import", "B", "--from", "b"])
    assert code == 1
    assert "Sandbox Violation" in caplog.text
    assert outside.read_text(encoding="utf-8") == MODULE_TEXT
