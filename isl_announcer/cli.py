"""Command-line interface for generating ISL announcements."""

import argparse
import logging
import sys

from .config import load_settings
from .generator import IslAnnouncementGenerator


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, enable DEBUG level logging.
    """
    level = logging.DEBUG if verbose else logging.INFO

    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    if verbose:
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='ISL Announcer - Build sign language videos from announcement text',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Stitch an announcement into one video
  %(prog)s --text "Train 12951 arriving at Mumbai Central"

  # Only print the per-word clip playlist
  %(prog)s --text "Mumbai Central" --no-stitch

  # Use a different clip library
  %(prog)s --text "hello" --dataset-dir ./public/isl_dataset --public-dir ./public
        """
    )

    parser.add_argument(
        '--text',
        type=str,
        required=True,
        help='Announcement text to convert (English)'
    )

    parser.add_argument(
        '--public-dir',
        type=str,
        help='Directory clip URLs are relative to (default: $ISL_PUBLIC_DIR or ./public)'
    )

    parser.add_argument(
        '--dataset-dir',
        type=str,
        help='Directory containing ISL clips (default: $ISL_DATASET_DIR or <public-dir>/isl_dataset)'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory for stitched videos (default: $ISL_OUTPUT_DIR or <public-dir>/isl_output)'
    )

    parser.add_argument(
        '--max-phrase-length',
        type=int,
        choices=range(1, 11),
        metavar='[1-10]',
        help='Maximum number of consecutive words to match as one clip (default: 3)'
    )

    parser.add_argument(
        '--no-stitch',
        action='store_true',
        help='Print the clip playlist without concatenating it'
    )

    parser.add_argument(
        '--no-digits',
        action='store_true',
        help='Do not split numbers into single digits before matching'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose debug logging'
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings()
        if args.public_dir:
            settings.public_dir = args.public_dir
        if args.dataset_dir:
            settings.dataset_dir = args.dataset_dir
        if args.output_dir:
            settings.output_dir = args.output_dir
        if args.max_phrase_length:
            settings.max_phrase_length = args.max_phrase_length

        generator = IslAnnouncementGenerator(settings)
        normalize_numbers = not args.no_digits

        if args.no_stitch:
            playlist = generator.generate_playlist(args.text, normalize_numbers)
            for item in playlist.items:
                print(f"{item.phrase}\t{item.path}")
            if playlist.missing_words:
                print(f"No clip for: {', '.join(playlist.missing_words)}", file=sys.stderr)
            return 0 if playlist else 1

        announcement = generator.generate_video(args.text, normalize_numbers)
        if announcement.missing_words:
            print(f"No clip for: {', '.join(announcement.missing_words)}", file=sys.stderr)

        if announcement.video is None:
            print("Error: ISL video unavailable for this text", file=sys.stderr)
            return 1

        print(f"Video created: {announcement.video.file_path}")
        return 0

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.", file=sys.stderr)
        logger.info("Operation cancelled by user")
        return 130

    except Exception as e:
        print(f"\nError: {str(e)}", file=sys.stderr)
        logger.exception("Fatal error occurred")
        return 1


if __name__ == '__main__':
    sys.exit(main())
