from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from google.protobuf import descriptor_pb2 as d2

from protoc_webapi_ts.errors import GeneratorError, ProtocError
from protoc_webapi_ts.generator.ts_file import generate
from protoc_webapi_ts.options import DEFAULT_WEBAPI_PATH, GeneratorOptions, Role


def _find_proto_files(root: str) -> List[str]:
    files: List[str] = []
    for dirpath, _, filenames in os.walk(root):
        for fn in filenames:
            if fn.lower().endswith(".proto"):
                files.append(os.path.join(dirpath, fn))
    # Sort for deterministic output
    files.sort()
    return files


def _dedup(items: Sequence[str]) -> List[str]:
    seen = set()
    result: List[str] = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result


def proto_name(proto_path: str, include_dirs: Sequence[str]) -> str:
    """Name protoc records for ``proto_path``: its path relative to the first include dir holding it."""
    abs_path = os.path.abspath(proto_path)
    for inc in include_dirs:
        abs_inc = os.path.abspath(inc)
        if os.path.commonpath([abs_path, abs_inc]) == abs_inc:
            return Path(os.path.relpath(abs_path, abs_inc)).as_posix()
    raise ProtocError(f"'{proto_path}' is not under any include directory: {', '.join(include_dirs)}")


def load_descriptor_set(proto_files: Sequence[str], include_dirs: Sequence[str]) -> d2.FileDescriptorSet:
    """Run protoc over ``proto_files`` and return the descriptor set, dependencies included."""
    inc_args: List[str] = []
    for inc in include_dirs:
        inc_args.extend(["-I", inc])

    with tempfile.TemporaryDirectory() as td:
        desc_path = os.path.join(td, "descriptor_set.pb")
        cmd = ["protoc", "--include_imports", f"--descriptor_set_out={desc_path}"] + inc_args + list(proto_files)
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except FileNotFoundError as e:
            raise ProtocError("'protoc' not found. Please install Protocol Buffers compiler and ensure it is in PATH.") from e
        except subprocess.CalledProcessError as e:
            raise ProtocError(f"protoc failed: {e.stderr.decode('utf-8', errors='ignore')}") from e

        fds = d2.FileDescriptorSet()
        with open(desc_path, "rb") as f:
            fds.ParseFromString(f.read())
    return fds


def run(proto: str, out_dir: str, options: GeneratorOptions, include_dirs: Sequence[str] = ()) -> List[str]:
    """Generate TypeScript for a .proto file or every .proto under a directory.

    Returns the list of written file paths.
    """
    if os.path.isdir(proto):
        proto_files = _find_proto_files(proto)
        default_include = proto
    else:
        proto_files = [proto]
        default_include = os.path.dirname(os.path.abspath(proto))
    if not proto_files:
        print(f"No .proto files found under directory: {proto}")
        return []

    includes = _dedup(list(include_dirs) + [default_include])
    names = [proto_name(p, includes) for p in proto_files]
    fds = load_descriptor_set(proto_files, includes)

    written: List[str] = []
    for rel_path, source in generate(fds.file, names, options).items():
        out_path = Path(out_dir) / rel_path
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(source + "\n", encoding="utf-8")
        written.append(str(out_path))
    return written


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Generate TypeScript interfaces, enums and webapi RPC stubs from .proto files",
    )
    parser.add_argument("--proto", required=True, help="Path to a .proto file or a directory containing .proto files (recursively)")
    parser.add_argument("--out", required=True, help="Output root; modules land in one directory per package segment")
    parser.add_argument("--server", action="store_true", help="Emit server-side (Express) handler registrations instead of client calls")
    parser.add_argument("--webapi-path", default=DEFAULT_WEBAPI_PATH, help="webapi helper module, relative to the output root (default: %(default)s)")
    parser.add_argument("--strict", action="store_true", help="Fail on field types without an explicit TypeScript mapping")
    parser.add_argument("-I", "--include", action="append", default=[], dest="includes", help="Extra protoc include directory (repeatable)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = GeneratorOptions(
        role=Role.SERVER if args.server else Role.CLIENT,
        webapi_path=args.webapi_path,
        strict=args.strict,
    )

    try:
        generated = run(args.proto, args.out, options, args.includes)
    except GeneratorError as e:
        print(f"FATAL: {e}", file=sys.stderr)
        sys.exit(1)

    if generated:
        print("Generated:\n" + "\n".join(generated))


if __name__ == "__main__":
    main()
