"""L1 Discovery Layer - finding buildable projects in a repository.

Core components:
- Directory: source file tree resolving partial paths
- Project: a buildable project, its source files and packages
- find_projects: files-first walk partitioning a repository into projects
"""

from spotscan.layers.l1_discovery.directory import Directory
from spotscan.layers.l1_discovery.project import Project
from spotscan.layers.l1_discovery.walker import files_first_walk, find_projects

__all__ = [
    "Directory",
    "Project",
    "files_first_walk",
    "find_projects",
]
