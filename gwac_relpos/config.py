"""
Configuration module for relative pointing computation.

Handles loading and saving of run parameters from YAML files.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
import logging

from .matcher import DEFAULT_MAX_GAP_SECONDS
from .parser import DEFAULT_FFOV_MODULUS

logger = logging.getLogger(__name__)


@dataclass
class ReferenceAngles:
    """
    Nominal mounting of the JFoV camera relative to the FFoV camera.
    Residuals are reported as reference minus measured value.
    """
    rotation: float = 0.0  # degrees
    tilt: float = 0.0  # degrees


@dataclass
class MatchingOptions:
    """Temporal matching parameters."""
    max_gap_seconds: float = DEFAULT_MAX_GAP_SECONDS


@dataclass
class CameraConventions:
    """
    Camera naming conventions.

    Camera ids that are multiples of ffov_modulus belong to FFoV cameras,
    all others to JFoV cameras.
    """
    ffov_modulus: int = DEFAULT_FFOV_MODULUS


@dataclass
class OutputOptions:
    """Where and whether to write the result file."""
    directory: str = "."
    write_file: bool = True


@dataclass
class Config:
    """
    Main configuration class for relative pointing computation.

    Attributes:
        reference: Reference rotation and tilt
        matching: Temporal matching parameters
        cameras: Camera naming conventions
        output: Result file options
    """
    reference: ReferenceAngles = field(default_factory=ReferenceAngles)
    matching: MatchingOptions = field(default_factory=MatchingOptions)
    cameras: CameraConventions = field(default_factory=CameraConventions)
    output: OutputOptions = field(default_factory=OutputOptions)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check parameter ranges."""
        if self.matching.max_gap_seconds < 0:
            raise ValueError(
                f"matching.max_gap_seconds must be non-negative, got {self.matching.max_gap_seconds}"
            )
        if self.cameras.ffov_modulus <= 0:
            raise ValueError(
                f"cameras.ffov_modulus must be positive, got {self.cameras.ffov_modulus}"
            )

    @classmethod
    def from_yaml(cls, config_path: str) -> "Config":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Config object with loaded parameters

        Example YAML structure:
            reference:
              rotation: 0.0
              tilt: 0.0
            matching:
              max_gap_seconds: 10.0
            cameras:
              ffov_modulus: 5
            output:
              directory: "results"
              write_file: true
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        logger.info(f"Loading configuration from {config_path}")

        ref_data = data.get('reference') or {}
        reference = ReferenceAngles(
            rotation=float(ref_data.get('rotation', 0.0)),
            tilt=float(ref_data.get('tilt', 0.0)),
        )

        match_data = data.get('matching') or {}
        matching = MatchingOptions(
            max_gap_seconds=float(match_data.get('max_gap_seconds', DEFAULT_MAX_GAP_SECONDS)),
        )

        cam_data = data.get('cameras') or {}
        cameras = CameraConventions(
            ffov_modulus=int(cam_data.get('ffov_modulus', DEFAULT_FFOV_MODULUS)),
        )

        # Resolve output directory relative to config file location
        out_data = data.get('output') or {}
        output = OutputOptions(
            directory=str(path.parent / out_data.get('directory', '.')),
            write_file=bool(out_data.get('write_file', True)),
        )

        return cls(
            reference=reference,
            matching=matching,
            cameras=cameras,
            output=output,
        )

    def to_yaml(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        data = {
            'reference': {
                'rotation': self.reference.rotation,
                'tilt': self.reference.tilt,
            },
            'matching': {
                'max_gap_seconds': self.matching.max_gap_seconds,
            },
            'cameras': {
                'ffov_modulus': self.cameras.ffov_modulus,
            },
            'output': {
                'directory': self.output.directory,
                'write_file': self.output.write_file,
            },
        }

        with open(config_path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")
