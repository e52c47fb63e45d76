"""Model-free face locator.

Components:
- build_edge_map: greyscale downsample + 3x3 high-pass convolution
- grow_region: 8-connected flood fill with an explicit work list
- score_region: symmetry / eye / mouth / edge distribution / position scoring
- resolve_overlaps: greedy non-max suppression
- locate_face: multi-pass orchestration with the one-face outcome policy
"""

from faceverify.detector.edges import build_edge_map
from faceverify.detector.locator import find_face_regions, locate_face, locate_faces
from faceverify.detector.overlap import overlap_area, overlap_ratio, resolve_overlaps
from faceverify.detector.region_grower import GrownRegion, grow_region, new_visited
from faceverify.detector.scoring import score_components, score_region

__all__ = [
    "build_edge_map",
    "find_face_regions",
    "locate_face",
    "locate_faces",
    "overlap_area",
    "overlap_ratio",
    "resolve_overlaps",
    "GrownRegion",
    "grow_region",
    "new_visited",
    "score_components",
    "score_region",
]
