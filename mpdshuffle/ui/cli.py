# mpdshuffle/ui/cli.py
import argparse
import logging
import sys
from typing import List, Optional, Sequence

from mpdshuffle.core.settings import ConfigError, Settings
from mpdshuffle.library.loaders import CheckFileLoader, FileLoader, Loader, LoaderError, MPDLoader
from mpdshuffle.library.sources import open_source
from mpdshuffle.player.player import Player
from mpdshuffle.server.client import MPDConnection, MPDError
from mpdshuffle.shuffle.chain import ShuffleChain
from mpdshuffle.shuffle.rules import Rule, rules_from_args

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpdshuffle",
        description="Keep MPD's queue topped up with random songs",
    )

    parser.add_argument("--only", "-o", type=int, metavar="N",
                        help="Add N random songs to the queue and exit")
    parser.add_argument("--queue-buffer", "-q", type=int, metavar="N",
                        help="Keep N songs queued after the current one (default=0)")
    parser.add_argument("--file", "-f", metavar="PATH",
                        help="Shuffle URIs from a file, '-' for stdin, or an http(s) URL")
    parser.add_argument("--nocheck", "-n", action="store_true",
                        help="Trust --file as-is: skip the library/rule check per URI")
    parser.add_argument("--exclude", "-e", nargs="+", action="append", metavar="TAG VALUE",
                        help="Exclude songs matching every TAG VALUE pair given (repeatable)")
    parser.add_argument("--host", help="MPD host, 'password@host' accepted (default: $MPD_HOST or localhost)")
    parser.add_argument("--port", "-p", type=int, help="MPD port (default: $MPD_PORT or 6600)")
    parser.add_argument("--window-size", type=int, metavar="N",
                        help="Songs per shuffle window; a song repeats at most once per window (default=7)")
    parser.add_argument("--weighted", action="store_true",
                        help="Pick windows proportionally to their size")
    parser.add_argument("--no-play-on-startup", dest="play_on_startup", action="store_false",
                        help="Don't start playback when mpdshuffle starts")
    parser.add_argument("--seed", type=int, help="Seed the shuffle (for reproducible runs)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log what is being queued")
    return parser


def build_loader(args: argparse.Namespace, conn: MPDConnection, rules: List[Rule], stream) -> Loader:
    if stream is None:
        return MPDLoader(conn, rules)
    if args.nocheck:
        if rules:
            logger.warning("--exclude has no effect on --file with --nocheck")
        return FileLoader(stream)
    return CheckFileLoader(conn, rules, stream)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # --- config ---
    try:
        if args.only is not None and args.only < 0:
            raise ConfigError(f"--only must not be negative, got {args.only}")
        settings = Settings.from_env().override(
            host=args.host,
            port=args.port,
            window_size=args.window_size,
            queue_buffer=args.queue_buffer,
        )
        rules = [rules_from_args(values) for values in (args.exclude or [])]
        chain = ShuffleChain(settings.window_size, weighted=args.weighted, rng_seed=args.seed)
    except ConfigError as exc:
        print(f"mpdshuffle: {exc}", file=sys.stderr)
        return 1

    conn = MPDConnection(settings)
    try:
        with conn:
            # --- load ---
            stream = open_source(args.file) if args.file else None
            try:
                build_loader(args, conn, rules, stream).load(chain)
            finally:
                if stream is not None and args.file != "-":
                    stream.close()

            if len(chain) == 0:
                print("No songs to shuffle (empty library, empty file, or everything excluded).",
                      file=sys.stderr)
                return 1

            reload = None
            if stream is None:
                def reload():
                    chain.clear()
                    MPDLoader(conn, rules).load(chain)

            player = Player(
                conn,
                chain,
                queue_buffer=settings.queue_buffer,
                play_on_startup=args.play_on_startup,
                reload=reload,
            )

            # --- play ---
            if args.only is not None:
                player.enqueue(args.only)
                print(f"Added {args.only} songs.")
                return 0

            print(f"Loaded {len(chain)} songs. Keeping the queue fed (Ctrl-C to quit)...")
            player.run()
    except (LoaderError, MPDError) as exc:
        print(f"mpdshuffle: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nStopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
