from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

from models.errors import InvalidArgumentError
from models.pixel import Pixel


class AdjustmentType(str, Enum):
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"


@dataclass(frozen=True)
class Adjustment:
    """
    Value-object holding an adjustment request in human-friendly units
    (amount_percent = 25 means +25 %).
    """
    kind: AdjustmentType
    amount_percent: int

    @property
    def factor(self) -> Fraction:
        # exact: 10 * (1 - 90/100) must truncate to 1, not 0
        return Fraction(100 + self.amount_percent, 100)

    @classmethod
    def parse(cls, kind: str, amount: str | int) -> Adjustment:
        """Validate raw CLI strings and build an Adjustment."""
        try:
            adj_type = AdjustmentType(kind)
        except ValueError:
            raise InvalidArgumentError(
                f'Not a valid adjustment type: {kind!r}. Try "brightness" or "contrast".'
            ) from None

        if isinstance(amount, bool):
            raise InvalidArgumentError(f"Adjustment amount must be an integer, got {amount!r}")
        if not isinstance(amount, int):
            try:
                amount = int(str(amount).strip())
            except ValueError:
                raise InvalidArgumentError(
                    f"Adjustment amount must be an integer, got {amount!r}"
                ) from None
        return cls(adj_type, amount)


# ── Core math ────────────────────────────────────────────────────
def _clamp_channel(value: float) -> int:
    # int() truncates toward zero
    return max(0, min(255, int(value)))


def adjust_pixel_brightness(pixel: Pixel, factor: float | Fraction) -> Pixel:
    """
    Scale R, G and B by `factor`, truncate, clamp to [0, 255].
    Alpha is left untouched.
    """
    return Pixel(
        _clamp_channel(pixel.r * factor),
        _clamp_channel(pixel.g * factor),
        _clamp_channel(pixel.b * factor),
        pixel.a,
    )
