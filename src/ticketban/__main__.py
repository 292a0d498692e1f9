"""Entry point for ticketban CLI."""

import sys

from ticketban.cli import build_parser


def main():
    parser = build_parser()
    args = parser.parse_args()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
