"""Letter-grade banding over an ordered threshold table."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel


class GradeBand(BaseModel):
    min_percentage: float
    letter: str


DEFAULT_GRADE_BANDS: Tuple[GradeBand, ...] = (
    GradeBand(min_percentage=80, letter="A"),
    GradeBand(min_percentage=70, letter="B"),
    GradeBand(min_percentage=60, letter="C"),
    GradeBand(min_percentage=50, letter="D"),
    GradeBand(min_percentage=40, letter="E"),
)
DEFAULT_FALLBACK_LETTER = "F"


class GradeBander:
    """Map a percentage to a letter, highest threshold first.

    The first band whose ``min_percentage`` is met wins; anything below the
    lowest threshold gets ``fallback``.
    """

    def __init__(
        self,
        bands: Iterable[GradeBand] = DEFAULT_GRADE_BANDS,
        *,
        fallback: str = DEFAULT_FALLBACK_LETTER,
    ) -> None:
        ordered = sorted(bands, key=lambda band: band.min_percentage, reverse=True)
        if not ordered:
            raise ValueError("Grade band table must contain at least one band")
        thresholds = [band.min_percentage for band in ordered]
        if len(set(thresholds)) != len(thresholds):
            raise ValueError(f"Duplicate grade band thresholds: {thresholds}")
        self._bands: List[GradeBand] = ordered
        self.fallback = fallback

    @property
    def bands(self) -> Sequence[GradeBand]:
        return tuple(self._bands)

    def band(self, percentage: float) -> str:
        if percentage is None:
            raise TypeError("Cannot band an ungraded result")
        value = float(percentage)
        for band in self._bands:
            if value >= band.min_percentage:
                return band.letter
        return self.fallback

    def __call__(self, percentage: float) -> str:
        return self.band(percentage)


_DEFAULT_BANDER: Optional[GradeBander] = None


def default_bander() -> GradeBander:
    global _DEFAULT_BANDER
    if _DEFAULT_BANDER is None:
        _DEFAULT_BANDER = GradeBander()
    return _DEFAULT_BANDER


def band(percentage: float) -> str:
    """Band ``percentage`` with the default A–F ladder."""
    return default_bander().band(percentage)
