"""Editor host implementations."""

from aub_builder.host.base import EditorHost
from aub_builder.host.project import ProjectHost

__all__ = ["EditorHost", "ProjectHost"]
