"""CLI entry point for the dynamic logo generator."""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from autocall_logo.config import Config, load_config
from autocall_logo.generate import generate_static, load_plan, random_plan
from autocall_logo.geometry import map_barrier_to_angle, map_barrier_to_angle_linear
from autocall_logo.models import PlanData, RenderOptions
from autocall_logo.output.dial_svg import render_dial_svg
from autocall_logo.plan_years import build_dial_layout
from autocall_logo.readings import compute_readings

logger = logging.getLogger(__name__)


def _input_path(args: argparse.Namespace, config: Config) -> Path:
    return Path(args.input) if args.input else config.resolved_input_path


def _print_inspection(plan: PlanData) -> None:
    readings = compute_readings(plan)
    layout = build_dial_layout(plan)

    print(f"{plan.plan_name} ({plan.tenor_years}y, {plan.start_date} -> {layout.end_date})")
    print(f"  rotation:        {readings.rotation_angle:8.2f} deg")
    print(f"  performance:     {readings.performance_label:>8}")
    print(f"  pointer:         {readings.pointer_angle:8.2f} deg ({plan.design_tokens.pointer_ease.value})")
    print(
        f"  barrier:         {readings.barrier_angle:8.2f} deg "
        f"(piecewise {map_barrier_to_angle(plan.barrier_percent):.2f}, "
        f"linear {map_barrier_to_angle_linear(plan.barrier_percent):.2f})"
    )
    print(f"  final hurdle:    {readings.final_hurdle_angle:8.2f} deg")
    if layout.next_observation_angle is None:
        print("  next obs arrow:  none")
    else:
        print(f"  next obs arrow:  {layout.next_observation_angle:8.2f} deg")
    print(f"  final index:     {layout.final_index_angle:8.2f} deg")
    print(
        f"  plan year:       Y{layout.current_year_index + 1} "
        f"({layout.progress * 100:.1f}% elapsed, {layout.days_per_segment:.2f} d/seg)"
    )
    for marker in layout.markers:
        flags = []
        if marker.is_past:
            flags.append("past")
        if marker.is_final:
            flags.append("final")
        if marker.triggered:
            flags.append("triggered")
        print(f"    obs {marker.date}  {marker.angle:8.2f} deg  {' '.join(flags)}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Autocalls.uk dynamic logo")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # generate command
    gen_parser = sub.add_parser("generate", help="Write the dated static snapshot and latest.svg")
    gen_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    gen_parser.add_argument("--input", type=str, default=None, help="Plan JSON file")
    gen_parser.add_argument("--output-dir", type=str, default=None, help="Directory for the snapshots")
    gen_parser.add_argument("--png", action="store_true", help="Also write a PNG preview")

    # render command
    render_parser = sub.add_parser("render", help="Render the live dial to an SVG file")
    render_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    render_parser.add_argument("--input", type=str, default=None, help="Plan JSON file")
    render_parser.add_argument("--output", type=str, default=None, help="SVG path (default: <output_dir>/dial.svg)")
    render_parser.add_argument("--debug", action="store_true", help="Draw debug overlays")
    render_parser.add_argument("--no-animate", action="store_true", help="Omit the ring animation")
    render_parser.add_argument("--size", type=int, default=None, help="Rendered width in pixels")

    # inspect command
    inspect_parser = sub.add_parser("inspect", help="Print the computed dial angles")
    inspect_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    inspect_parser.add_argument("--input", type=str, default=None, help="Plan JSON file")

    # randomize command
    random_parser = sub.add_parser("randomize", help="Write a random plan JSON")
    random_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    random_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    random_parser.add_argument("--output", type=str, default=None, help="JSON path (default: stdout)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(Path(args.config) if args.config else None)

    try:
        if args.command == "generate":
            plan = load_plan(_input_path(args, config))
            output_dir = Path(args.output_dir) if args.output_dir else config.resolved_output_dir
            result = generate_static(
                plan, output_dir,
                png=args.png or config.static.png,
                png_size=config.static.png_size,
                fonts=config.fonts,
            )
            print(result)

        elif args.command == "render":
            plan = load_plan(_input_path(args, config))
            options = RenderOptions(
                animate=config.render.animate and not args.no_animate,
                debug=args.debug or config.render.debug,
                size=args.size or config.render.size,
            )
            output = Path(args.output) if args.output else config.resolved_output_dir / "dial.svg"
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(render_dial_svg(plan, options), encoding="utf-8")
            logger.info("Dial saved to %s", output)
            print(output)

        elif args.command == "inspect":
            _print_inspection(load_plan(_input_path(args, config)))

        elif args.command == "randomize":
            plan = random_plan(random.Random(args.seed))
            text = json.dumps(plan.model_dump(mode="json"), indent=2, ensure_ascii=False)
            if args.output:
                Path(args.output).write_text(text + "\n", encoding="utf-8")
                print(args.output)
            else:
                print(text)

        else:
            parser.print_help()

    except (ValueError, OSError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
