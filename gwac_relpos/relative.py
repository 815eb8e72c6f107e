"""
Relative position of the JFoV centre in the FFoV-centred frame.

For a matched pair the JFoV pointing is rotated into the spherical frame
whose pole is the FFoV pointing:
    - rotation: longitude in that frame, degrees in [0, 360)
    - tilt: 90 - latitude in that frame, i.e. the angular separation
      between the two field centres

Residuals are measured against a reference rotation and tilt describing
the nominal mechanical mounting of the JFoV camera.
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Optional
import logging

from .geometry import rotate_to_frame
from .matcher import MatchedPair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelativeResult:
    """Relative pointing derived from one matched pair."""
    ra: float  # JFoV R.A., degrees
    dec: float  # JFoV Dec., degrees
    source_id: str  # JFoV image filename
    ra0: float  # FFoV R.A., degrees
    dec0: float  # FFoV Dec., degrees
    source_id0: str  # FFoV image filename
    rotation: float  # degrees, [0, 360)
    tilt: float  # degrees
    rotation_residual: float  # reference - rotation, (-180, 180]
    tilt_residual: float  # reference - tilt


def wrap_residual(delta: float) -> float:
    """
    Wrap an angle difference into (-180, 180].

    One step of 360 is applied, which covers differences of two angles
    each in [0, 360).
    """
    if delta > 180.0:
        delta -= 360.0
    elif delta <= -180.0:
        delta += 360.0
    return delta


class RelativePositionCalculator:
    """
    Computes rotation, tilt and residuals for matched JFoV/FFoV pairs.

    Example usage:
        calculator = RelativePositionCalculator(reference_rotation=90.0)
        results = calculator.compute_all(pairs)
    """

    def __init__(self, reference_rotation: float = 0.0, reference_tilt: float = 0.0):
        """
        Initialize the calculator.

        Args:
            reference_rotation: Baseline rotation in degrees
            reference_tilt: Baseline tilt in degrees
        """
        self.reference_rotation = reference_rotation
        self.reference_tilt = reference_tilt

    def compute(
        self,
        pair: MatchedPair,
        reference_rotation: Optional[float] = None,
        reference_tilt: Optional[float] = None,
    ) -> RelativeResult:
        """
        Compute the relative position for one matched pair.

        Args:
            pair: Matched JFoV/FFoV samples
            reference_rotation: Overrides the calculator's baseline rotation
            reference_tilt: Overrides the calculator's baseline tilt

        Returns:
            RelativeResult for the pair
        """
        if reference_rotation is None:
            reference_rotation = self.reference_rotation
        if reference_tilt is None:
            reference_tilt = self.reference_tilt

        jfov, ffov = pair.jfov, pair.ffov
        lon, lat = rotate_to_frame(ffov.ra_rad, ffov.dec_rad, jfov.ra_rad, jfov.dec_rad)

        # Reported as a zenith-style angle, not as latitude
        rotation = float(np.rad2deg(lon)) % 360.0
        tilt = 90.0 - float(np.rad2deg(lat))

        return RelativeResult(
            ra=jfov.right_ascension,
            dec=jfov.declination,
            source_id=jfov.source_id,
            ra0=ffov.right_ascension,
            dec0=ffov.declination,
            source_id0=ffov.source_id,
            rotation=rotation,
            tilt=tilt,
            rotation_residual=wrap_residual(reference_rotation - rotation),
            tilt_residual=reference_tilt - tilt,
        )

    def compute_all(self, pairs: Iterable[MatchedPair]) -> List[RelativeResult]:
        """Compute relative positions for pairs, preserving their order."""
        results = [self.compute(pair) for pair in pairs]
        logger.debug(f"Computed {len(results)} relative positions")
        return results
