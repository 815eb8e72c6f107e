"""
Record file parser.

Parses the astrometry result files produced for each camera and decodes
the image filenames they reference.

Record File Format:
    One record per line, whitespace separated:
        ra dec filename

    - ra, dec: field centre in degrees
    - filename: the FITS image the pointing was solved from

    Example:
        244.1236   31.5512 G041_mon_objt_171028T20153000.fit
        244.1291   31.5510 G041_mon_objt_171028T20154500.fit

Image Filename Format:
    G<cam_id>_[mon_]<imgtype>_<YYMMDD>T<hhmmssfs>.fit

    - cam_id: camera identifier; ids divisible by 5 belong to FFoV cameras
    - mon: optional observation-type token
    - imgtype: image type abbreviation
    - YYMMDD: UTC date
    - hhmmssfs: UTC time, fs in units of 10 ms
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple
import logging

from .errors import EmptySeries, RecordFormatError
from .series import AngularSample, FieldOfView, TimeSeries

logger = logging.getLogger(__name__)

DEFAULT_FFOV_MODULUS = 5

FILENAME_PATTERN = re.compile(
    r'^G(?P<cam_id>[^_]+)_'
    r'(?:(?i:mon)_)?'
    r'(?P<imgtype>[^_]+)_'
    r'(?P<ymd>\d{6})T(?P<hms>\d{8})'
    r'\.fits?$'
)


@dataclass(frozen=True)
class ImageName:
    """Fields decoded from an image filename."""
    camera_id: str
    image_type: str
    calendar_date: int  # YYMMDD
    hour: int
    minute: int
    centiseconds: int  # seconds in units of 0.01 s

    @property
    def time_of_day(self) -> float:
        return (self.hour * 60 + self.minute) * 60 + self.centiseconds * 0.01


@dataclass
class CameraStream:
    """A decoded record file, tagged with its field of view."""
    camera_id: str
    field_of_view: FieldOfView
    series: TimeSeries
    source_path: Optional[str] = None


def decode_image_name(filename: str) -> ImageName:
    """
    Decode an image filename.

    Args:
        filename: Image filename, optionally with a directory prefix

    Returns:
        ImageName

    Raises:
        RecordFormatError: The name does not follow the acquisition convention
    """
    name = Path(filename).name
    match = FILENAME_PATTERN.match(name)
    if not match:
        raise RecordFormatError(f"Cannot decode image filename: {filename}")

    hms = int(match.group('hms'))
    centiseconds = hms % 10000
    hhmm = hms // 10000

    decoded = ImageName(
        camera_id=match.group('cam_id'),
        image_type=match.group('imgtype'),
        calendar_date=int(match.group('ymd')),
        hour=hhmm // 100,
        minute=hhmm % 100,
        centiseconds=centiseconds,
    )
    if decoded.hour > 23 or decoded.minute > 59 or centiseconds >= 6000:
        raise RecordFormatError(f"Invalid time of day in image filename: {filename}")
    return decoded


def classify_camera(camera_id: str, ffov_modulus: int = DEFAULT_FFOV_MODULUS) -> FieldOfView:
    """
    Classify a camera as FFoV or JFoV by its identifier.

    Args:
        camera_id: Camera identifier from the image filename
        ffov_modulus: FFoV camera ids are multiples of this value

    Returns:
        FieldOfView of the camera
    """
    try:
        number = int(camera_id)
    except ValueError:
        raise RecordFormatError(f"Camera id is not numeric: {camera_id}") from None
    return FieldOfView.FFOV if number % ffov_modulus == 0 else FieldOfView.JFOV


def parse_line(line: str) -> Optional[Tuple[float, float, str]]:
    """
    Split a record line into (ra, dec, filename).

    Returns:
        The parsed fields, or None for blank and comment lines

    Raises:
        ValueError: The line is malformed
    """
    line = line.strip()
    if not line or line.startswith('#'):
        return None

    parts = line.split()
    if len(parts) < 3:
        raise ValueError(f"expected 'ra dec filename', got {len(parts)} fields")
    return float(parts[0]), float(parts[1]), parts[2]


class RecordFileParser:
    """
    Parser for per-camera record files.

    The field of view of a file is decided once, from the camera id of the
    first decodable record.
    """

    def __init__(self, ffov_modulus: int = DEFAULT_FFOV_MODULUS):
        """
        Initialize parser.

        Args:
            ffov_modulus: FFoV camera ids are multiples of this value
        """
        self.ffov_modulus = ffov_modulus

    def parse_file(self, filepath: str) -> CameraStream:
        """
        Parse a record file.

        Args:
            filepath: Path to the record file

        Returns:
            CameraStream holding the decoded samples

        Raises:
            FileNotFoundError: The file does not exist
            RecordFormatError: No record in the file could be decoded
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Record file not found: {filepath}")

        logger.info(f"Resolving file: {filepath}")

        samples: List[AngularSample] = []
        camera_id = None

        with open(path, 'r') as f:
            for line_num, line in enumerate(f, 1):
                try:
                    fields = parse_line(line)
                except ValueError as e:
                    logger.warning(f"Skipping invalid line {line_num}: {e}")
                    continue
                if fields is None:
                    continue

                ra, dec, filename = fields
                image = decode_image_name(filename)

                if camera_id is None:
                    camera_id = image.camera_id
                elif image.camera_id != camera_id:
                    logger.warning(
                        f"Line {line_num}: camera {image.camera_id} differs from "
                        f"camera {camera_id} of the first record"
                    )

                samples.append(AngularSample(
                    right_ascension=ra,
                    declination=dec,
                    time_of_day=image.time_of_day,
                    source_id=filename,
                    calendar_date=image.calendar_date,
                ))

        if camera_id is None:
            raise RecordFormatError(f"Failed to resolve file <{filepath}>: no points found")

        field_of_view = classify_camera(camera_id, self.ffov_modulus)
        logger.info(f"File <{filepath}> is considered to be from {field_of_view.value}")
        logger.info(f"{len(samples)} points are resolved from file")

        return CameraStream(
            camera_id=camera_id,
            field_of_view=field_of_view,
            series=TimeSeries.from_samples(samples),
            source_path=str(filepath),
        )


def assign_streams(
    first: CameraStream,
    second: CameraStream,
) -> Tuple[CameraStream, CameraStream]:
    """
    Order two streams as (jfov, ffov), whatever order they were given in.

    Raises:
        EmptySeries: Neither stream belongs to one of the fields of view
    """
    streams = {first.field_of_view: first}
    if second.field_of_view in streams:
        logger.warning(
            f"Both files are from {second.field_of_view.value}; "
            f"keeping <{second.source_path}>"
        )
    streams[second.field_of_view] = second

    for fov in (FieldOfView.JFOV, FieldOfView.FFOV):
        if fov not in streams:
            raise EmptySeries(fov.value)

    return streams[FieldOfView.JFOV], streams[FieldOfView.FFOV]


def parse_record_file(filepath: str, ffov_modulus: int = DEFAULT_FFOV_MODULUS) -> CameraStream:
    """
    Convenience function to parse a record file.

    Args:
        filepath: Path to the record file
        ffov_modulus: FFoV camera ids are multiples of this value

    Returns:
        CameraStream
    """
    return RecordFileParser(ffov_modulus=ffov_modulus).parse_file(filepath)
