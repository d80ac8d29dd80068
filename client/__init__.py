"""Client package for the scene-sync game client."""

__all__ = [
    "constants",
    "entities",
    "errors",
    "framing",
    "input",
    "main",
    "network",
    "protocol",
    "reconciler",
    "render",
    "router",
    "session",
    "snapshot",
]
