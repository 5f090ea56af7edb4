"""World-state building blocks for a role-playing game shard server."""

__version__ = "0.1.0"