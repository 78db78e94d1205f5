"""CLI entry point: run `sourcelink main.js` or `python -m sourcelink main.js`."""

import logging
import sys
from pathlib import Path
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .compiler.driver import LinkerDriver, LinkOptions
    from .runtime.prelude import stringify
    from .runtime.runtime import SourceRuntime
    from .utils.io_utils import read_source_tree, to_module_key

    parser = argparse.ArgumentParser(prog="sourcelink", description="Link Source (.js) modules into one program.")
    parser.add_argument("entry", type=Path, help="Entry file")
    parser.add_argument("--root", type=Path, default=None,
                        help="Project root; every .js file below it can be imported (default: entry's directory)")
    parser.add_argument("--run", action="store_true", help="Run the linked program instead of printing it")
    parser.add_argument("--allow-undefined-imports", action="store_true",
                        help="Do not check that imported names are exported")
    parser.add_argument("--resolve-extension", action="append", default=[], metavar="EXT",
                        help="Suffix tried for specifiers that name no file (repeatable)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    entry = args.entry.resolve()
    if not entry.is_file():
        sys.stderr.write(f"sourcelink: error: file not found: {entry}\n")
        return 1
    root = (args.root or entry.parent).resolve()
    try:
        entry_key = to_module_key(entry, root)
    except ValueError:
        sys.stderr.write(f"sourcelink: error: {entry} is not inside {root}\n")
        return 1

    try:
        files = read_source_tree(root)
    except OSError as e:
        sys.stderr.write(f"sourcelink: error: could not read sources: {e}\n")
        return 1

    options = LinkOptions(
        allow_undefined_imports=args.allow_undefined_imports,
        resolve_extensions=tuple(args.resolve_extension),
    )
    driver = LinkerDriver()
    result = driver.link(files, entry_key, options)
    if not result.success:
        sys.stderr.write(result.reporter.format_all_errors() + "\n")
        return 1

    if not args.run:
        sys.stdout.write(result.to_source() + "\n")
        return 0

    exec_result = SourceRuntime(registry=driver.registry).execute(result.program)
    for line in exec_result.displayed:
        sys.stdout.write(line + "\n")
    if exec_result.error is not None:
        sys.stderr.write(f"sourcelink: runtime error: {exec_result.error}\n")
        return 1
    sys.stdout.write(stringify(exec_result.value) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
