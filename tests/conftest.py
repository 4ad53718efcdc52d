"""Pytest session configuration shared by all test packages."""

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch, tmp_path: Path):
    """Keep tests away from the user's ~/.plugforge config and PLUGFORGE_* env."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for key in list(os.environ):
        if key.startswith("PLUGFORGE_"):
            monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A templates directory holding a small ``demo`` template."""
    root = tmp_path / "templates"
    demo = root / "demo"
    demo.mkdir(parents=True)
    (demo / "cli.stub").write_text("#!/usr/bin/env x\n// {{slug}}", encoding="utf-8")
    (demo / "plugin.php.stub").write_text("<?php // {{pluginName}}", encoding="utf-8")
    (demo / "readme.stub").write_text("{{name}} by {{authorName}}", encoding="utf-8")
    return root
