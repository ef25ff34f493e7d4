"""Exception hierarchy for Markforge."""

from typing import Any


class MarkforgeError(Exception):
    """Base exception for all Markforge errors."""

    pass


class GeometryError(MarkforgeError):
    """Errors in geometric calculations."""

    pass


class MarkStructureError(MarkforgeError):
    """A motif candidate violates the path-only structure rules."""

    def __init__(self, family: str, reason: str) -> None:
        self.family = family
        self.reason = reason
        super().__init__(f"Motif mark '{family}' rejected: {reason}")


class DeviceError(MarkforgeError):
    """A customization device could not be applied to its target."""

    def __init__(self, device: str, target: str, reason: str) -> None:
        self.device = device
        self.target = target
        self.reason = reason
        super().__init__(f"Device '{device}' on '{target}' failed: {reason}")


class PlanError(MarkforgeError):
    """Malformed customization plan data."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid customization plan: {reason}")


class OutlineError(MarkforgeError):
    """Errors related to glyph outline acquisition."""

    pass


class FontNotFoundError(OutlineError):
    """No font file is registered or present for the requested identity."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"Font not found: {identity}")


class OutlineLoadError(OutlineError):
    """A font file exists but could not be loaded or drawn."""

    def __init__(self, identity: str, reason: str) -> None:
        self.identity = identity
        self.reason = reason
        super().__init__(f"Failed to load outlines for '{identity}': {reason}")


class OutlineQualityError(OutlineError):
    """Outline geometry failed the quality gate (placeholder-like output)."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Outline rejected by quality gate: {reason}")


class OutlineUnavailableError(OutlineError):
    """Every provider tier failed to produce genuine outline geometry."""

    def __init__(self, attempts: list[Any]) -> None:
        self.attempts = attempts
        tiers = ", ".join(f"{a.tier}={a.reason.value}" for a in attempts) or "no tiers"
        super().__init__(f"No outline provider succeeded ({tiers})")
