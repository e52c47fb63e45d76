#!/usr/bin/env python3
"""Face location on static images.

This script runs the quality, lighting, blur, and face location checks on a
single image file and optionally saves the result with the located region.

Usage:
    python scripts/run_image.py --image path/to/image.jpg
    python scripts/run_image.py --image photo.jpg --save result.jpg --verbose
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import cv2

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from faceverify.codec import OpenCVImageCodec
from faceverify.config import Config
from faceverify.detector import build_edge_map, locate_faces
from faceverify.detector.scoring import score_components
from faceverify.errors import FaceVerificationError, status_code_for
from faceverify.logging_config import setup_logging
from faceverify.overlay import draw_region, draw_status
from faceverify.services import FaceVerificationService
from faceverify.utils import cover_crop_box

logger = setup_logging(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Validate an image and locate a single face",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--image",
        type=str,
        required=True,
        help="Path to input image file",
    )

    parser.add_argument(
        "--save",
        type=str,
        default=None,
        help="Path to save the annotated edge-map view",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print per-component scores of every candidate region",
    )

    return parser.parse_args()


def print_section(title: str) -> None:
    """Print a section divider."""
    print()
    print("=" * 70)
    print(f"  {title}")
    print("=" * 70)


def main() -> int:
    """Main function."""
    args = parse_args()

    print_section("Face Location - Static Image")

    image_path = Path(args.image)
    if not image_path.exists():
        logger.error(f"Image not found: {image_path}")
        print(f"Error: Image file not found: {image_path}")
        return 1

    config = Config.from_env()
    pipeline = config.pipeline_config()
    logger.info(f"Loaded config: thresh={config.thresh}, max_faces={config.max_faces}")

    print(f"Input image:   {image_path}")
    print(f"Save output:   {args.save or 'No'}")

    image_bytes = image_path.read_bytes()
    codec = OpenCVImageCodec()
    service = FaceVerificationService(codec=codec, config=pipeline)

    print_section("Step 1: Quality Checks")
    region = None
    error = None
    try:
        metadata = service.validate_image(image_bytes)
        print(f"Image:         {metadata.width}x{metadata.height} {metadata.format.upper()}")

        stats = service.analyze_image_stats(image_bytes)
        print(f"Brightness:    {stats.mean:.1f}")
        print(f"Contrast:      {stats.std:.1f}")

        print_section("Step 2: Face Location")
        region = service.locate_face(image_bytes)
    except FaceVerificationError as e:
        error = e
        logger.warning(f"Check failed: {e.message}")
        print(f"Failed ({status_code_for(e)}): [{e.kind}] {e.message}")
        for key, value in e.details.items():
            print(f"  {key}: {value}")

    if region is not None:
        print("Face located:")
        print(f"  Box:      ({region.x}, {region.y}) {region.width}x{region.height}")
        print(f"  Density:  {region.density:.3f}")
        print(f"  Score:    {region.face_score:.3f}")

    edges = None
    if args.verbose or args.save:
        try:
            edges = build_edge_map(codec, image_bytes, pipeline.detection)
        except FaceVerificationError as e:
            logger.error(f"Could not build edge map: {e.message}")

    if args.verbose and edges is not None:
        print_section("Candidate Regions")
        candidates = locate_faces(edges, pipeline.detection)
        if not candidates:
            print("No candidate regions")
        for i, candidate in enumerate(candidates, 1):
            components = score_components(edges, candidate, pipeline.detection)
            parts = ", ".join(f"{k}={v:.2f}" for k, v in components.items())
            print(f"Region {i}: score={candidate.face_score:.3f} ({parts})")

    if args.save and edges is not None:
        print_section("Output")
        frame = cv2.imread(str(image_path))
        if frame is None:
            print("Error: Could not read image file for drawing")
            return 1

        # Crop to the same centered view the edge map was built from
        h, w = frame.shape[:2]
        size = pipeline.detection.edge_map_size
        x1, y1, x2, y2 = cover_crop_box(w, h, size, size)
        view = frame[y1:y2, x1:x2].copy()

        if region is not None:
            draw_region(view, region, source_size=(size, size), label="face")
            draw_status(view, "FACE OK", ok=True)
        else:
            draw_status(view, error.kind.upper() if error else "NO FACE", ok=False)

        cv2.imwrite(args.save, view)
        print(f"Image saved: {args.save}")

    print()
    return 0 if region is not None else 2


if __name__ == "__main__":
    sys.exit(main())
