import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from overlay.codec import decode_image, encode_png
from overlay.config import OverlaySettings
from overlay.core import load_overlay_config
from overlay.models import overlay_request_from_dict
from overlay.render import render_overlay


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Burn a title/subtitle overlay into a base image."
    )
    parser.add_argument(
        "--image",
        type=Path,
        required=True,
        help="Path to the base image.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the overlay config JSON (flat title_*/subtitle_* fields).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("outputs/overlay.png"),
        help="Where to write the composited PNG.",
    )
    return parser.parse_args()


def main() -> None:
    # Load environment variables from a local .env file if present
    # (e.g. OVERLAY_RASTER_DENSITY=144).
    load_dotenv()
    logging.basicConfig(level=logging.INFO)

    args = parse_args()
    settings = OverlaySettings.from_env()

    base_img = decode_image(args.image.read_bytes())
    title, subtitle = overlay_request_from_dict(load_overlay_config(args.config))
    rendered = render_overlay(base_img, title=title, subtitle=subtitle, settings=settings)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(encode_png(rendered))
    print(f"Overlay written to {args.output}")


if __name__ == "__main__":
    main()
