"""Customization devices and plans.

A device is a named, parametrized geometric edit applied to one glyph
(notch cut, seam cut) or a pair of glyphs (ligature bridge). Devices form a
closed set: ``DeviceSpec`` is the union of the three frozen dataclasses below,
and every consumer dispatches over exactly these types.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from markforge.exceptions import PlanError


class NotchSide(str, Enum):
    """Edge of the glyph bbox a notch is cut from."""

    INNER = "inner"
    OUTER = "outer"
    TOP = "top"
    BOTTOM = "bottom"


class BridgeLevel(str, Enum):
    """Vertical placement of a ligature bridge."""

    BASELINE = "baseline"
    XHEIGHT = "xheight"
    CAP = "cap"


@dataclass(frozen=True, slots=True)
class NotchCut:
    """Wedge-shaped notch cut into one glyph.

    Attributes:
        letter: Target character (case-insensitive)
        side: Edge the wedge points into
        depth: Zone height as a fraction of the glyph bbox height
        width: Zone width as a fraction of the glyph bbox width
    """

    letter: str
    side: NotchSide = NotchSide.OUTER
    depth: float = 0.3
    width: float = 0.3

    kind = "notch_cut"

    @property
    def target(self) -> str:
        return self.letter

    def normalized(self) -> "NotchCut":
        return replace(self, letter=self.letter.lower())

    def intensified(self, cut_factor: float, bridge_factor: float) -> "NotchCut":  # noqa: ARG002
        return replace(self, depth=self.depth * cut_factor, width=self.width * cut_factor)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "target": "single",
            "letter": self.letter,
            "side": self.side.value,
            "depth": self.depth,
            "width": self.width,
        }


@dataclass(frozen=True, slots=True)
class SeamCut:
    """Diagonal band cut across one glyph.

    Attributes:
        letter: Target character (case-insensitive)
        angle_deg: Band angle in degrees
        thickness: Band height as a fraction of the glyph bbox height
        offset: Band start offset from the bbox corner, in path units
    """

    letter: str
    angle_deg: float = 30.0
    thickness: float = 0.08
    offset: float = 0.0

    kind = "seam_cut"

    @property
    def target(self) -> str:
        return self.letter

    def normalized(self) -> "SeamCut":
        return replace(self, letter=self.letter.lower())

    def intensified(self, cut_factor: float, bridge_factor: float) -> "SeamCut":  # noqa: ARG002
        return replace(self, thickness=self.thickness * cut_factor)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "target": "single",
            "letter": self.letter,
            "angle_deg": self.angle_deg,
            "thickness": self.thickness,
            "offset": self.offset,
        }


@dataclass(frozen=True, slots=True)
class LigatureBridge:
    """Rounded bar joining two glyphs across their gap.

    Attributes:
        from_letter: Left glyph character
        to_letter: Right glyph character
        thickness: Bar height as a fraction of the mean glyph height
        y_pos: Vertical placement of the bar
    """

    from_letter: str
    to_letter: str
    thickness: float = 0.1
    y_pos: BridgeLevel = BridgeLevel.BASELINE

    kind = "ligature_bridge"

    @property
    def target(self) -> str:
        return f"{self.from_letter}-{self.to_letter}"

    def normalized(self) -> "LigatureBridge":
        return replace(
            self, from_letter=self.from_letter.lower(), to_letter=self.to_letter.lower()
        )

    def intensified(self, cut_factor: float, bridge_factor: float) -> "LigatureBridge":  # noqa: ARG002
        return replace(self, thickness=self.thickness * bridge_factor)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "target": "pair",
            "from": self.from_letter,
            "to": self.to_letter,
            "thickness": self.thickness,
            "y_pos": self.y_pos.value,
        }


DeviceSpec = NotchCut | SeamCut | LigatureBridge


def device_from_dict(data: dict[str, Any]) -> DeviceSpec:
    """Parse a tagged device dictionary.

    Args:
        data: Dictionary with a ``kind`` of notch_cut, seam_cut or ligature_bridge

    Returns:
        The matching device

    Raises:
        PlanError: If the kind is unknown or required fields are missing
    """
    kind = data.get("kind")
    try:
        if kind == NotchCut.kind:
            return NotchCut(
                letter=str(data["letter"]),
                side=NotchSide(data.get("side", NotchSide.OUTER.value)),
                depth=float(data.get("depth", 0.3)),
                width=float(data.get("width", 0.3)),
            )
        if kind == SeamCut.kind:
            return SeamCut(
                letter=str(data["letter"]),
                angle_deg=float(data.get("angle_deg", 30.0)),
                thickness=float(data.get("thickness", 0.08)),
                offset=float(data.get("offset", 0.0)),
            )
        if kind == LigatureBridge.kind:
            return LigatureBridge(
                from_letter=str(data["from"]),
                to_letter=str(data["to"]),
                thickness=float(data.get("thickness", 0.1)),
                y_pos=BridgeLevel(data.get("y_pos", BridgeLevel.BASELINE.value)),
            )
    except KeyError as e:
        raise PlanError(f"device '{kind}' is missing field {e}") from e
    except ValueError as e:
        raise PlanError(f"device '{kind}' has an invalid value: {e}") from e
    raise PlanError(f"unknown device kind: {kind!r}")


@dataclass(frozen=True, slots=True)
class Boldness:
    """Width compression and weight bias."""

    compression: float = 1.0
    weight_bias: float = 0.0


@dataclass(frozen=True, slots=True)
class Optical:
    """Optical corrections."""

    overshoot: float = 0.0


@dataclass(frozen=True)
class CustomizationPlan:
    """Ordered list of devices plus global adjustments for one wordmark.

    Attributes:
        target_letters: Letters the plan intends to touch
        devices: Devices applied in list order
        boldness: Compression and weight bias
        optical: Optical corrections
        reject_if: Advisory rejection conditions carried for callers
    """

    target_letters: tuple[str, ...] = ()
    devices: tuple[DeviceSpec, ...] = ()
    boldness: Boldness = field(default_factory=Boldness)
    optical: Optical = field(default_factory=Optical)
    reject_if: tuple[str, ...] = ()

    def normalized(self) -> "CustomizationPlan":
        """Lower-case every target letter and device letter field."""
        return replace(
            self,
            target_letters=tuple(letter.lower() for letter in self.target_letters),
            devices=tuple(device.normalized() for device in self.devices),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "target_letters": list(self.target_letters),
            "devices": [d.to_dict() for d in self.devices],
            "boldness": {
                "compression": self.boldness.compression,
                "weight_bias": self.boldness.weight_bias,
            },
            "optical": {"overshoot": self.optical.overshoot},
            "reject_if": list(self.reject_if),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomizationPlan":
        """Deserialize a plan.

        Raises:
            PlanError: If a device entry is malformed
        """
        boldness = data.get("boldness") or {}
        optical = data.get("optical") or {}
        try:
            return cls(
                target_letters=tuple(str(x) for x in data.get("target_letters", [])),
                devices=tuple(device_from_dict(d) for d in data.get("devices", [])),
                boldness=Boldness(
                    compression=float(boldness.get("compression", 1.0)),
                    weight_bias=float(boldness.get("weight_bias", 0.0)),
                ),
                optical=Optical(overshoot=float(optical.get("overshoot", 0.0))),
                reject_if=tuple(str(x) for x in data.get("reject_if", [])),
            )
        except (TypeError, ValueError) as e:
            raise PlanError(str(e)) from e
