"""
Version information for the GameMint SDK.
"""
import importlib.metadata
import pathlib

import tomli

DEFAULT_VERSION = "0.1.0"
PYPROJECT_PATH = pathlib.Path(__file__).parent.parent / "pyproject.toml"


def _version_from_pyproject(path: pathlib.Path = PYPROJECT_PATH) -> str:
    """Read the project version from a source checkout, or return the default"""
    try:
        with path.open("rb") as f:
            data = tomli.load(f)
        return data["project"]["version"]
    except (FileNotFoundError, KeyError, TypeError, tomli.TOMLDecodeError):
        return DEFAULT_VERSION


try:
    __version__ = importlib.metadata.version("gamemint-sdk")
except importlib.metadata.PackageNotFoundError:
    __version__ = _version_from_pyproject()
