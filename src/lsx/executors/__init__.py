"""Built-in executors.

- vfs: directory-backed reference executor for exercising clients
"""

from lsx.executors.vfs import VFSExecutor

__all__ = ["VFSExecutor"]
