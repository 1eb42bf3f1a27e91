"""
Command-line entry point for vehicle inspection.

Detects the vehicle in each photo, crops to it and prints the classifier's
issue probability.

Usage:
    python src/main.py --config config/config.yaml photo.jpg [more.jpg | photos/ ...]

Arguments:
    --config: Path to configuration file
    --save-crops: Write each vehicle crop to output.crop_dir
    --log-level: Override log_level from the config
"""

import os
import sys
import argparse
import logging
from typing import Dict, Any, Tuple, Optional

import cv2
import yaml

from inference import BACKENDS
from models.errors import ModelLoadError, PreprocessError
from models.result import InspectionResult
from observation import FileImageSource, FileImageSourceConfig
from ops.logging import setup_logging
from pipeline.engine import NO_DETECTION_POLICIES, create_pipeline_from_config
from preprocessing.pixels import image_to_bgra
from preprocessing.resample import INTERPOLATIONS

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge nested config sections from override into base (in place)."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Build the inspection config from the YAML files next to config_path.

    default.yaml supplies model paths, input sizes and policies; config.yaml
    in the same directory overrides them for this machine; config_path itself
    is applied last when it is a different file. Exits with status 1 when a
    file cannot be read or parsed.
    """
    config_dir = os.path.dirname(config_path)
    site_path = os.path.join(config_dir, "config.yaml")
    try:
        merged = _deep_merge(
            _read_yaml(os.path.join(config_dir, "default.yaml")),
            _read_yaml(site_path),
        )
        if os.path.abspath(config_path) != os.path.abspath(site_path):
            merged = _deep_merge(merged, _read_yaml(config_path))
        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _validate_input_size(value: Any, name: str) -> Optional[str]:
    if not isinstance(value, list) or len(value) != 2:
        return f"{name}.input_size must be a list of [width, height]"
    if not all(isinstance(x, int) and x > 0 for x in value):
        return f"{name}.input_size values must be positive integers"
    return None


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['inference', 'detector', 'classifier', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    inference = config.get('inference', {}) or {}
    backend = inference.get('backend', 'tflite')
    if backend not in BACKENDS:
        return False, f"inference.backend must be one of: {', '.join(BACKENDS)}"
    if 'num_threads' in inference:
        if not isinstance(inference['num_threads'], int) or inference['num_threads'] <= 0:
            return False, "inference.num_threads must be a positive integer"

    for name in ('detector', 'classifier'):
        model = config.get(name) or {}
        path = model.get('model_path')
        if not isinstance(path, str) or not path:
            return False, f"{name}.model_path is required"
        if 'input_size' in model:
            error = _validate_input_size(model['input_size'], name)
            if error:
                return False, error

    preprocessing = config.get('preprocessing', {}) or {}
    if 'flatten_alpha' in preprocessing and not isinstance(preprocessing['flatten_alpha'], bool):
        return False, "preprocessing.flatten_alpha must be a boolean"
    interpolation = preprocessing.get('interpolation', 'auto')
    if interpolation != 'auto' and interpolation not in INTERPOLATIONS:
        return False, f"preprocessing.interpolation must be one of: auto, {', '.join(INTERPOLATIONS)}"

    pipeline = config.get('pipeline', {}) or {}
    policy = pipeline.get('no_detection_policy', 'fail')
    if policy not in NO_DETECTION_POLICIES:
        return False, f"pipeline.no_detection_policy must be one of: {', '.join(NO_DETECTION_POLICIES)}"

    output = config.get('output', {}) or {}
    if 'crop_dir' in output and not isinstance(output['crop_dir'], str):
        return False, "output.crop_dir must be a string"

    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def save_crop(result: InspectionResult, source_path: str, crop_dir: str) -> Optional[str]:
    """Write the classified region next to its source name; returns the path written."""
    if result.crop is None:
        return None
    if not os.path.exists(crop_dir):
        os.makedirs(crop_dir)

    stem = os.path.splitext(os.path.basename(source_path))[0]
    out_path = os.path.join(crop_dir, f"{stem}_crop.png")
    if not cv2.imwrite(out_path, image_to_bgra(result.crop)):
        logging.warning(f"Failed to write crop: {out_path}")
        return None
    return out_path


def main(argv=None) -> int:
    """Main application function."""
    parser = argparse.ArgumentParser(description='Vehicle Inspection - detect, crop and classify')
    parser.add_argument('images', nargs='+',
                        help='Image files or directories of images')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--save-crops', action='store_true',
                        help='Save vehicle crops to output.crop_dir')
    parser.add_argument('--log-level', type=str, choices=VALID_LOG_LEVELS,
                        help='Override log_level from the config')
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config['log_level'] = args.log_level

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1

    setup_logging(config['log_path'], config['log_level'])
    logging.info("Starting Vehicle Inspection")

    try:
        pipeline = create_pipeline_from_config(config)
    except ModelLoadError as e:
        logging.error(f"Pipeline unavailable: {e}")
        print(f"Model unavailable: {e}")
        return 1

    output_cfg = config.get('output', {}) or {}
    save_crops = args.save_crops or bool(output_cfg.get('save_crops', False))
    crop_dir = output_cfg.get('crop_dir', 'output/crops')

    failures = 0
    source = FileImageSource(FileImageSourceConfig(source_id="cli", paths=args.images))
    try:
        with pipeline, source:
            while True:
                try:
                    item = source.read()
                except PreprocessError as e:
                    failures += 1
                    logging.warning(f"Skipping unreadable image: {e}")
                    print(f"Failed: {e}")
                    continue
                if item is None:
                    break

                path, image = item
                result = pipeline.run(image)
                if not result.ok:
                    failures += 1
                logging.info(f"{path}: {result.describe()}")
                print(f"{path}: {result.describe()}")

                if save_crops:
                    written = save_crop(result, path, crop_dir)
                    if written:
                        logging.info(f"Saved crop: {written}")
    except RuntimeError as e:
        logging.error(f"Image source error: {e}")
        return 1
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    finally:
        logging.info("Vehicle Inspection stopped")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
