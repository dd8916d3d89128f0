"""Deployment primitives.

- PackPlatform: create/status/destroy/generation for one pack deployment
- ToolInvoker: runs the `nomad-pack` binary
- StatusTableParser: reads `nomad-pack status` tables
- StateStore: persisted resource state
"""

from .invoker import ToolInvoker
from .manager import PackPlatform
from .parser import StatusTableParser
from .state import StateStore

__all__ = [
    "PackPlatform",
    "ToolInvoker",
    "StatusTableParser",
    "StateStore",
]
