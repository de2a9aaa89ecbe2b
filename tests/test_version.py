"""
Tests for the version module of the GameMint SDK.
"""
import importlib
import re
from importlib import metadata as importlib_metadata
from unittest.mock import patch

import pytest

from gamemint_sdk import __version__
from gamemint_sdk.version import DEFAULT_VERSION, _version_from_pyproject


def test_version_format():
    """Test that the version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', __version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When the package is installed, version comes from its metadata"""
    mock_metadata_version.return_value = "2.3.4"
    import gamemint_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"
    mock_metadata_version.assert_called_with("gamemint-sdk")


@patch('importlib.metadata.version', side_effect=importlib_metadata.PackageNotFoundError)
def test_version_falls_back_to_checkout(mock_metadata_version):
    """Without metadata the version is read from the repository's pyproject.toml"""
    import gamemint_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == _version_from_pyproject()


def test_pyproject_version(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "gamemint-sdk"\nversion = "1.2.3"\n')
    assert _version_from_pyproject(path) == "1.2.3"


@pytest.mark.parametrize("content", [
    '[project]\nname = "gamemint-sdk"\n',           # no version key
    '[tool.setuptools]\npackages = ["gamemint_sdk"]\n',  # no project table
    'project = "gamemint-sdk"\n',                   # project is not a table
    '[project\nversion = ',                          # not TOML
])
def test_pyproject_without_version_uses_default(tmp_path, content):
    path = tmp_path / "pyproject.toml"
    path.write_text(content)
    assert _version_from_pyproject(path) == DEFAULT_VERSION


def test_missing_pyproject_uses_default(tmp_path):
    assert _version_from_pyproject(tmp_path / "missing.toml") == DEFAULT_VERSION
