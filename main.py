import argparse
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

import cqcode.error as error
import cqcode.logger as log
import cqcode.util as u
import cqcode.config_io as config_io
from cqcode.config_schema import AppConfig
from cqcode.error import SegmentError
from cqcode.message import Message, RawSegment
from cqcode.tokenizer import tokenize
from segments.text import Text

l = log.get_logger()


def _read_source(src: str | None) -> str:
    if src is None or src == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(src).read_text(encoding="utf-8")
    # A trailing newline from the shell or an editor is not message content
    return raw.rstrip("\r\n")


def _write_output(text: str, dst: str | None) -> None:
    if dst is None or dst == "-":
        sys.stdout.write(text + "\n")
        return
    dst_path = Path(dst)
    dst_path.parent.mkdir(parents=True, exist_ok=True)
    dst_path.write_text(text, encoding="utf-8")


def _load_settings(config: str | None) -> AppConfig:
    if config:
        path = Path(config)
        if not path.is_file():
            raise FileNotFoundError(f"config file not found: {path}")
    else:
        path = config_io.find_config(Path(u.get_data_path()))

    if path is not None:
        l.debug(f"Loading config from: {path}")
    with error.catch_and_log(f"loading config {path}"):
        return config_io.load_app_config(path)


def cmd_convert(args) -> int:
    settings = _load_settings(args.config)
    message = tokenize(_read_source(args.src))

    target = args.to or settings.message.post_format
    drop_invalid = args.ignore_invalid or settings.message.ignore_invalid_cqcode
    message = message.resolve(errors="skip" if drop_invalid else "keep")

    with error.catch_and_log(f"rendering as {target}"):
        out = message.render(target)

    _write_output(out, args.output)
    if args.output not in (None, "-"):
        print(f"Converted {args.src or 'stdin'} → {args.output} ({target})", file=sys.stderr)
    return 0


def _describe(token) -> str:
    if isinstance(token, Text):
        return f"text\t{token.text!r}"
    if isinstance(token, RawSegment):
        try:
            return f"{token.tag}\t{token.resolve()!r}"
        except SegmentError as e:
            return f"{token.tag or '?'}\t{type(e).__name__}: {e}"
    return f"{token.tag}\t{token!r}"


def cmd_inspect(args) -> int:
    message: Message = tokenize(_read_source(args.src))
    for i, token in enumerate(message):
        print(f"{i}\t{_describe(token)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cqcode", description="CQ code message converter")
    parser.add_argument("--config", help="Config file (json/yaml/toml); default: search the data directory")
    subparsers = parser.add_subparsers(dest="command", required=True)

    conv = subparsers.add_parser("convert", help="Convert a message between string and array notation")
    conv.add_argument("src", nargs="?", help="Source file (default: stdin)")
    conv.add_argument("-o", "--output", help="Destination file (default: stdout)")
    conv.add_argument("--to", choices=["string", "array"], help="Target notation (default: message.post-format)")
    conv.add_argument("--ignore-invalid", action="store_true",
                      help="Drop segments that fail to decode instead of passing them through as text")
    # Also accepted after the subcommand; SUPPRESS keeps a top-level value
    conv.add_argument("--config", default=argparse.SUPPRESS, help="Same as the top-level --config")
    conv.set_defaults(func=cmd_convert)

    insp = subparsers.add_parser("inspect", help="List the tokens of a message")
    insp.add_argument("src", nargs="?", help="Source file (default: stdin)")
    insp.set_defaults(func=cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except ValidationError as exc:
        print(f"Config error:\n{exc}", file=sys.stderr)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
    return 1


def cli() -> None:
    error.install_excepthook()
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
