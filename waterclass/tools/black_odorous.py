from __future__ import annotations

import argparse

from waterclass.core.black_odorous import (
    AMMONIA_NITROGEN,
    DISSOLVED_OXYGEN,
    TRANSPARENCY,
    evaluate_black_odorous,
)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Grade one urban water sample as black/odorous.")
    p.add_argument("--sd", required=True, help="Transparency in cm (negative = not measured)")
    p.add_argument("--do", required=True, help="Dissolved oxygen in mg/L (negative = not measured)")
    p.add_argument("--nh3n", required=True, help="Ammonia nitrogen in mg/L (negative = not measured)")
    p.add_argument("--depth", required=True, help="Water depth in cm")
    p.add_argument("--clear", action="store_true", help="Bottom visible through the water column")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        result = evaluate_black_odorous(
            sd=args.sd,
            do=args.do,
            nh3n=args.nh3n,
            depth=args.depth,
            clear_to_bottom=args.clear,
        )
    except TypeError as e:
        print(f"ERROR: {e}")
        return 2

    for name in (TRANSPARENCY, DISSOLVED_OXYGEN, AMMONIA_NITROGEN):
        c = result.factor_class(name)
        print(f"{name:<17} {c.label if c is not None else 'not measured'}")

    print(f"{'overall':<17} {result.overall.label if result.overall is not None else 'ungraded'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
