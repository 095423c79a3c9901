"""Exceptions raised by the docking engine.

Unknown ids on deletion are tolerated silently; everything else that would
leave the tree inconsistent is rejected with one of these.
"""


class DockLayoutError(Exception):
    """Base exception for docking layout errors."""

    pass


class NodeNotFoundError(DockLayoutError, KeyError):
    """Raised when an operation references a node that is not in the tree."""

    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")

    def __str__(self):
        return self.args[0]


class InvalidGrowError(DockLayoutError, ValueError):
    """Raised when a grow weight is not a finite positive number."""

    def __init__(self, node_id, value, message=None):
        self.node_id = node_id
        self.value = value
        super().__init__(message or f"Invalid grow value for {node_id}: {value!r}")


class InvalidMoveError(DockLayoutError, ValueError):
    """Raised when a node would be inserted next to itself or its own subtree."""

    def __init__(self, moving_id, target_id, message=None):
        self.moving_id = moving_id
        self.target_id = target_id
        super().__init__(
            message or f"Cannot move {moving_id} next to {target_id}"
        )


class TreeCorruptionError(DockLayoutError):
    """Raised when a tree breaks a structural invariant.

    This signals a bug in the engine (or a hand-built tree), not a
    recoverable condition.
    """

    def __init__(self, problems):
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("Corrupt layout tree: " + "; ".join(self.problems))


class ConfigError(DockLayoutError, ValueError):
    """Raised when settings cannot be parsed or validated."""

    pass
