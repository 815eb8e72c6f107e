"""
GWAC Relative Pointing Package

Measures the position of a narrow-field camera (JFoV) relative to the
wide-field camera (FFoV) sharing its mount, from the astrometric field
centres solved for each camera's images.

Processing Chain:
    Record files → TimeSeries (JFoV, FFoV) → time matching →
    rotation into the FFoV-centred frame → rotation / tilt / residuals

Conventions:
    - Sky positions in degrees (R.A., Dec.)
    - Rotation: JFoV longitude about the FFoV centre, [0, 360)
    - Tilt: 90 - latitude in the FFoV-centred frame
    - Residual: reference value minus measured value

Assumptions:
    - The mount tracks sidereally for the whole run
    - Each record file is in time order and covers a single night
"""

from .config import Config, ReferenceAngles, MatchingOptions, CameraConventions, OutputOptions
from .errors import (
    RelposError,
    EmptySeries,
    MultiDayInput,
    NoOverlap,
    UnorderedSeries,
    RecordFormatError,
)
from .geometry import sphere_to_cart, cart_to_sphere, rotate_to_frame
from .series import AngularSample, TimeSeries, FieldOfView, validate_single_day, overlaps
from .matcher import Matcher, MatchedPair, find_matches
from .relative import RelativePositionCalculator, RelativeResult, wrap_residual
from .report import ReportAggregator, RelativePositionReport, RelativeStatistics, compute_statistics
from .parser import RecordFileParser, CameraStream, parse_record_file, classify_camera
from .pipeline import RelativePositionRunner, run_relative_position

__version__ = "1.0.0"
__all__ = [
    "Config",
    "ReferenceAngles",
    "MatchingOptions",
    "CameraConventions",
    "OutputOptions",
    "RelposError",
    "EmptySeries",
    "MultiDayInput",
    "NoOverlap",
    "UnorderedSeries",
    "RecordFormatError",
    "sphere_to_cart",
    "cart_to_sphere",
    "rotate_to_frame",
    "AngularSample",
    "TimeSeries",
    "FieldOfView",
    "validate_single_day",
    "overlaps",
    "Matcher",
    "MatchedPair",
    "find_matches",
    "RelativePositionCalculator",
    "RelativeResult",
    "wrap_residual",
    "ReportAggregator",
    "RelativePositionReport",
    "RelativeStatistics",
    "compute_statistics",
    "RecordFileParser",
    "CameraStream",
    "parse_record_file",
    "classify_camera",
    "RelativePositionRunner",
    "run_relative_position",
]
