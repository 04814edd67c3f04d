"""Release notes from the commit range between two GitHub references."""

from importlib import metadata

__version__ = metadata.version("releasenotes")
