"""taskforge scaffolder.

Partitions generated files into the ``frontend/`` and ``backend/`` halves of
the output project, normalizes their paths, and synthesizes the manifests,
bootstrap sources and start scripts around them.
"""

from taskforge.scaffolder.assembler import (
    AssembledProject,
    Bucket,
    CollisionKind,
    CollisionRecord,
    ProjectAssembler,
    ProjectFile,
    normalize_path,
    partition,
)
from taskforge.scaffolder.templates import TemplateRenderer

__all__ = [
    "ProjectAssembler",
    "AssembledProject",
    "ProjectFile",
    "CollisionRecord",
    "CollisionKind",
    "Bucket",
    "partition",
    "normalize_path",
    "TemplateRenderer",
]
