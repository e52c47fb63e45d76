#!/usr/bin/env python3
"""Register, verify, or compare faces against the JSON embedding store.

Usage:
    python scripts/verify_image.py register --image alice.jpg --user alice
    python scripts/verify_image.py verify --image query.jpg --user alice
    python scripts/verify_image.py compare --image query.jpg --embedding stored.json
    python scripts/verify_image.py info
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from faceverify.codec import OpenCVImageCodec
from faceverify.config import Config
from faceverify.embedder_onnx import OnnxEmbeddingModel
from faceverify.errors import FaceVerificationError, status_code_for
from faceverify.logging_config import setup_logging
from faceverify.services import FaceVerificationService
from faceverify.store import JsonEmbeddingStore

logger = setup_logging(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Face verification against stored embeddings",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Similarity threshold (overrides .env THRESH value)",
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="ONNX model path (overrides .env MODEL_PATH value)",
    )
    parser.add_argument(
        "--store",
        type=str,
        default=None,
        help="Embedding store JSON path (overrides .env STORE_PATH value)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    register = sub.add_parser("register", help="Enroll a user from an image")
    register.add_argument("--image", type=str, required=True, help="Enrollment image")
    register.add_argument("--user", type=str, default=None, help="User id (generated if omitted)")

    verify = sub.add_parser("verify", help="Verify an image against a stored user")
    verify.add_argument("--image", type=str, required=True, help="Query image")
    verify.add_argument("--user", type=str, required=True, help="User id")

    compare = sub.add_parser("compare", help="Compare an image against an embedding file")
    compare.add_argument("--image", type=str, required=True, help="Query image")
    compare.add_argument(
        "--embedding", type=str, required=True, help="File holding a JSON embedding array"
    )

    sub.add_parser("info", help="Show service configuration")

    return parser.parse_args()


def build_service(args: argparse.Namespace, config: Config) -> FaceVerificationService:
    """Assemble the service from config and CLI overrides."""
    model_path = Path(args.model) if args.model else config.model_path
    store_path = Path(args.store) if args.store else config.store_path

    model = None
    if model_path.exists():
        model = OnnxEmbeddingModel(model_path)
    else:
        logger.warning(f"Model not found at {model_path}; embedding calls will fail")

    service = FaceVerificationService(
        codec=OpenCVImageCodec(),
        model=model,
        store=JsonEmbeddingStore(store_path),
        config=config.pipeline_config(),
    )
    if args.threshold is not None:
        service.set_threshold(args.threshold)
    return service


def read_image(path: str) -> bytes:
    image_path = Path(path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")
    return image_path.read_bytes()


def main() -> int:
    """Main function."""
    args = parse_args()
    config = Config.from_env()
    service = build_service(args, config)

    try:
        if args.command == "register":
            result = service.register_user(args.user, read_image(args.image))
            output = {
                "success": True,
                "userId": result.user_id,
                "embeddingDimensions": int(result.embedding.size),
                "createdAt": result.created_at,
            }
        elif args.command == "verify":
            result = service.verify_user(args.user, read_image(args.image))
            output = {"success": True, "userId": result.user_id, **result.match.to_dict()}
        elif args.command == "compare":
            stored = Path(args.embedding).read_text()
            match = service.compare_embeddings(read_image(args.image), stored)
            output = {"success": True, **match.to_dict()}
        else:
            output = service.service_info()
            if isinstance(service.model, OnnxEmbeddingModel):
                output["model"]["graph"] = service.model.info()
    except FaceVerificationError as e:
        logger.error(f"{args.command} failed: {e.message}")
        output = {"success": False, "status": status_code_for(e), **e.to_dict()}
        print(json.dumps(output, indent=2, default=str))
        return 1
    except FileNotFoundError as e:
        logger.error(str(e))
        print(f"Error: {e}")
        return 1

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
