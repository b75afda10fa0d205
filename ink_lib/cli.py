"""Command-line entry point for offline stroke recognition.

Reads strokes from a JSON file, either ``{"strokes": [[[x, y], ...], ...]}``
or a bare list of strokes, in capture-surface coordinates.

Usage:
    ink-recognize render strokes.json --out capture.png
    ink-recognize encode strokes.json --out tensor.npy
    ink-recognize recognize strokes.json --model model.pt --labels labels.txt
    ink-recognize recognize strokes.json --model model.pt --labels labels.txt \\
        --config config.json --top-k 3 --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from .config import RecognizerConfig
from .domain.session import SessionSnapshot
from .errors import RecognizerError
from .recognition.recognizer import Recognizer
from .utils.rendering import capture
from .utils.tensor import encode_raster

logger = logging.getLogger(__name__)


def load_strokes(path: str | Path) -> SessionSnapshot:
    """Read a stroke JSON file into a snapshot.

    Raises:
        ValueError: If the JSON is not a stroke list or strokes object.
    """
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get('strokes')
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of strokes or {{'strokes': [...]}}")
    return SessionSnapshot.from_list(data)


def _load_config(args: argparse.Namespace) -> RecognizerConfig:
    config = (RecognizerConfig.from_json_file(args.config)
              if args.config else RecognizerConfig())
    if getattr(args, 'top_k', None) is not None:
        config = config.replace(top_k=args.top_k)
    return config


def cmd_render(args: argparse.Namespace) -> int:
    config = _load_config(args)
    image = capture(load_strokes(args.strokes), config)
    if image is None:
        print("Nothing to recognize: no strokes in input", file=sys.stderr)
        return 1
    image.save(args.out)
    logger.info("Saved %dx%d raster to %s", image.width, image.height, args.out)
    return 0


def cmd_encode(args: argparse.Namespace) -> int:
    config = _load_config(args)
    image = capture(load_strokes(args.strokes), config)
    if image is None:
        print("Nothing to recognize: no strokes in input", file=sys.stderr)
        return 1
    tensor = encode_raster(image, config.input_size, config.luma_weights)
    np.save(args.out, tensor)
    logger.info("Saved tensor %s to %s", tensor.shape, args.out)
    return 0


def cmd_recognize(args: argparse.Namespace) -> int:
    config = _load_config(args)
    snapshot = load_strokes(args.strokes)
    if snapshot.is_empty():
        print("Nothing to recognize: no strokes in input", file=sys.stderr)
        return 1
    recognizer = Recognizer.from_files(args.model, args.labels, config=config,
                                       device=args.device)
    results = recognizer.recognize_session(snapshot)

    if args.json:
        print(json.dumps([r.to_dict() for r in results], ensure_ascii=False))
    else:
        print(f"{'Rank':<6} {'Glyph':<6} {'Confidence'}")
        print("-" * 30)
        for rank, r in enumerate(results, 1):
            print(f"{rank:<6} {r.glyph:<6} {r.confidence:.1%}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ink-recognize',
        description='Normalize handwritten strokes and recognize characters')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--config', help='JSON file with RecognizerConfig overrides')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('render', help='Save the recognition raster as an image')
    p.add_argument('strokes', help='Stroke JSON file')
    p.add_argument('--out', required=True, help='Output image path (PNG)')
    p.set_defaults(func=cmd_render)

    p = sub.add_parser('encode', help='Save the model input tensor as .npy')
    p.add_argument('strokes', help='Stroke JSON file')
    p.add_argument('--out', required=True, help='Output .npy path')
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser('recognize', help='Run the full pipeline with a TorchScript model')
    p.add_argument('strokes', help='Stroke JSON file')
    p.add_argument('--model', required=True, help='TorchScript model path')
    p.add_argument('--labels', required=True, help='Label file, one label per line')
    p.add_argument('--top-k', type=int, default=None, help='Number of results (default: config)')
    p.add_argument('--device', default=None, help="'cpu' or 'cuda' (default: auto)")
    p.add_argument('--json', action='store_true', help='Print results as JSON')
    p.set_defaults(func=cmd_recognize)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command-line arguments and run the chosen sub-command.

    Returns:
        Process exit code: 0 on success, 1 for empty input, 2 for
        recognition or input errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    try:
        return args.func(args)
    except (RecognizerError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == '__main__':
    sys.exit(main())
