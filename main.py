import argparse
import sys

from coder import HuffmanCoder
from huffman import count_frequencies, format_frequencies


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="huffzap",
        description="Huffman-coding file compressor",
    )
    subparsers = parser.add_subparsers(
        title="modes", dest="cmd", required=True
    )

    compress = subparsers.add_parser(
        "compress", aliases=["zap"], help="Compress a file"
    )
    compress.add_argument("input", help="File to compress")
    compress.add_argument("output", help="Compressed output file")

    decompress = subparsers.add_parser(
        "decompress", aliases=["unzap"], help="Decompress a file"
    )
    decompress.add_argument("input", help="Compressed file")
    decompress.add_argument("output", help="Restored output file")

    freqs = subparsers.add_parser(
        "freqs", help="Print the byte frequency table of a file"
    )
    freqs.add_argument("input", help="File to analyse")

    return parser


def _error(message: str) -> None:
    """Print a user-facing problem to the error stream.

    :param message: Text shown after the ``[!]`` prefix.
    :type message: str
    :returns: None
    :rtype: None
    """
    print(f"[!] {message}", file=sys.stderr)


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


def compress_file(input_path: str, output_path: str) -> None:
    """Compress ``input_path`` into ``output_path`` and report the result.

    :raises OSError: If a file cannot be read or written.
    """
    stats = HuffmanCoder().compress_file(input_path, output_path)
    if stats.empty:
        print(f"{input_path} is empty and cannot be compressed.")
        return
    print(f"Success! Encoded given text using {stats.bit_count} bits.")
    print("Size before compression: ", _fmt_bytes(stats.input_size))
    print("Size after compression: ", _fmt_bytes(stats.output_size))


def decompress_file(input_path: str, output_path: str) -> None:
    """Decompress ``input_path`` into ``output_path``.

    :raises OSError: If a file cannot be read or written.
    :raises ValueError: If the compressed file is corrupt.
    :raises EOFError: If the compressed file is truncated.
    """
    HuffmanCoder().decompress_file(input_path, output_path)


def print_frequencies(input_path: str) -> None:
    """Print the byte frequency table of ``input_path``.

    :param input_path: File to analyse.
    :type input_path: str
    :returns: None
    :rtype: None
    :raises OSError: If the file cannot be read.
    """
    with open(input_path, "rb") as f:
        data = f.read()
    for line in format_frequencies(count_frequencies(data)):
        print(line)


def main(argv=None) -> int:
    """Entry point for the CLI tool.

    :param argv: Argument list; defaults to ``sys.argv[1:]``.
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    try:
        if args.cmd in ["compress", "zap"]:
            compress_file(args.input, args.output)
        elif args.cmd in ["decompress", "unzap"]:
            decompress_file(args.input, args.output)
        elif args.cmd == "freqs":
            print_frequencies(args.input)
    except OSError as e:
        _error(f"Cannot access file: {e}")
        return 1
    except EOFError as e:
        _error(f"Compressed file is truncated: {e}")
        return 1
    except ValueError as e:
        _error(f"Compressed file is corrupt: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
