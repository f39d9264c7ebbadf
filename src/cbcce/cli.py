from __future__ import annotations

import argparse
import importlib
import inspect
import json
import re
import sys
from datetime import datetime, timezone
from typing import Dict, List


_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def _parse_when(s: str) -> datetime:
    """YYYY-MM-DD or YYYY-MM-DDTHH:MM[:SS][+HH:MM]; without an offset the clock is UTC."""
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as e:
        raise SystemExit(f"Bad date '{s}': expected YYYY-MM-DD[THH:MM[:SS]][+HH:MM]") from e
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _parse_fields(items: List[str]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise SystemExit(f"Bad field '{item}': expected NAME=VALUE")
        try:
            out[name] = int(value)
        except ValueError as e:
            raise SystemExit(f"Bad value for '{name}': {value!r} is not an integer") from e
    return out


def _load_params(args: argparse.Namespace):
    import cbcce

    if getattr(args, "params_file", None):
        try:
            with open(args.params_file, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise SystemExit(f"Cannot read parameter file {args.params_file}: {e}") from e
        try:
            return cbcce.ParameterSet.from_dict(data)
        except cbcce.ParameterSetError as e:
            raise SystemExit(f"{args.params_file}: {e}") from e
    try:
        return cbcce.get_parameter_set(args.params)
    except KeyError as e:
        raise SystemExit(e.args[0]) from e


def _add_params_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--params", default="milesian", help="registered parameter set name")
    p.add_argument("--params-file", default=None, help="JSON parameter set (overrides --params)")


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def cmd_decompose(argv: list[str]) -> int:
    from cbcce.core.engine import decompose

    p = argparse.ArgumentParser(prog="cbcce decompose", description="Scalar quantity -> record")
    p.add_argument("quantity", type=int, help="quantity in the parameter set's base unit (e.g. Unix ms)")
    _add_params_options(p)
    args = p.parse_args(argv)

    rec = decompose(args.quantity, _load_params(args))
    for name, value in rec.items():
        print(f"{name} = {value}")
    return 0


def cmd_compose(argv: list[str]) -> int:
    import cbcce

    p = argparse.ArgumentParser(prog="cbcce compose", description="Record -> scalar quantity")
    p.add_argument("fields", nargs="+", help="NAME=VALUE (repeatable); missing fields default to their init")
    _add_params_options(p)
    args = p.parse_args(argv)

    params = _load_params(args)
    rec = params.initial_record()
    given = _parse_fields(args.fields)
    unknown = sorted(set(given) - set(rec))
    if unknown:
        raise SystemExit(f"Unknown field(s) {unknown}. Fields: {list(params.field_names)}")
    rec.update(given)
    print(cbcce.compose(rec, params))
    return 0


def cmd_day(argv: list[str]) -> int:
    from cbcce.calendars import milesian
    from cbcce.core.time import datetime_to_ms

    p = argparse.ArgumentParser(prog="cbcce day", description="Gregorian -> Milesian date")
    p.add_argument("date", help="YYYY-MM-DD[THH:MM[:SS]][+HH:MM], UTC unless an offset is given")
    p.add_argument("--offset", type=int, default=0, help="show the date in a zone this many minutes east of UTC")
    p.add_argument("--time", action="store_true", help="also show HH:MM:SS")
    args = p.parse_args(argv)

    ms = datetime_to_ms(_parse_when(args.date))
    md = milesian.from_timestamp(ms, offset_minutes=args.offset)
    print(milesian.display(md, with_time=args.time))
    return 0


def cmd_gregorian(argv: list[str]) -> int:
    import cbcce
    from cbcce.calendars import milesian

    p = argparse.ArgumentParser(prog="cbcce gregorian", description="Milesian date -> Gregorian date")
    p.add_argument("year", type=int)
    p.add_argument("month", type=int, help="1..12")
    p.add_argument("day", type=int, help="1..31")
    args = p.parse_args(argv)

    try:
        dt = milesian.to_datetime(args.year, args.month, args.day)
    except cbcce.CalendarDateError as e:
        raise SystemExit(str(e)) from e
    except OverflowError as e:
        # outside the datetime range (year 1..9999)
        raise SystemExit(f"Gregorian date out of datetime range: {e}") from e
    print(dt.date().isoformat())
    return 0


def cmd_params(argv: list[str]) -> int:
    import cbcce

    p = argparse.ArgumentParser(prog="cbcce params", description="List or describe parameter sets")
    p.add_argument("name", nargs="?", default=None)
    p.add_argument("--json", action="store_true", help="dump the full table as JSON")
    args = p.parse_args(argv)

    if args.name is None:
        for name in cbcce.list_parameter_sets():
            print(name)
        return 0

    try:
        info = cbcce.parameter_info(args.name)
    except KeyError as e:
        raise SystemExit(e.args[0]) from e
    if args.json:
        print(json.dumps(cbcce.get_parameter_set(args.name).to_dict(), indent=2))
        return 0
    for k, v in info.items():
        print(f"{k}: {v}")
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # Shortcut: `cbcce YYYY-MM-DD ...`
    if argv and _DATE_RE.match(argv[0]):
        return cmd_day(argv)

    p = argparse.ArgumentParser(prog="cbcce", description="Cycle-based calendar computation toolkit CLI.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("decompose", help="Scalar quantity -> record", add_help=False)
    sub.add_parser("compose", help="Record -> scalar quantity", add_help=False)
    sub.add_parser("day", help="Gregorian -> Milesian date", add_help=False)
    sub.add_parser("gregorian", help="Milesian date -> Gregorian date", add_help=False)
    sub.add_parser("params", help="List or describe parameter sets", add_help=False)

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument(
        "tool",
        choices=["year-lengths", "round-trip"],
        help="Which diagnostic to run",
    )

    args, rest = p.parse_known_args(argv)

    if args.cmd == "decompose":
        return cmd_decompose(rest)

    if args.cmd == "compose":
        return cmd_compose(rest)

    if args.cmd == "day":
        return cmd_day(rest)

    if args.cmd == "gregorian":
        return cmd_gregorian(rest)

    if args.cmd == "params":
        return cmd_params(rest)

    if args.cmd == "diag":
        tool_map = {
            "year-lengths": "cbcce.diagnostics.year_lengths",
            "round-trip": "cbcce.diagnostics.round_trip",
        }
        return _run_module_main(tool_map[args.tool], rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
