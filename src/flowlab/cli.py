# src/flowlab/cli.py
"""
flowlab command line.

    flowlab lessons list
    flowlab lessons show NAME
    flowlab render NAME [--section S] [--set k=v]... [--out DIR] [--fmt F]...
    flowlab open NAME [--section S]
    flowlab animate [--omega-big W] [--omega w] [--frames N] [--out PATH]
    flowlab config show

Exit codes: 0 success, 1 flowlab error (message on stderr), 2 usage error.
"""
from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt

from flowlab import lessons as lesson_mod
from flowlab.config import Config, _get_config_path, load_config
from flowlab.errors import ConfigError, ControlError, FlowlabError
from flowlab.models.firefly import Firefly
from flowlab.plot import _theme, export, phase_animate, save_gif

__all__ = ["main", "build_parser"]


def _parse_sets(items: Sequence[str] | None) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for item in items or ():
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ControlError(f"Expected --set name=value, got {item!r}.")
        out[name.strip()] = value.strip()
    return out


def _check_fmts(fmts: Sequence[str]) -> tuple[str, ...]:
    supported = export.supported_formats()
    norm = tuple(f.strip().lower().lstrip(".") for f in fmts)
    bad = [raw for raw, f in zip(fmts, norm) if f not in supported]
    if bad:
        raise ControlError(
            f"Unsupported output format: {', '.join(bad)}. Choose from: {', '.join(sorted(supported))}."
        )
    return norm


def _apply_config(cfg: Config) -> None:
    try:
        _theme.use(cfg.theme)
    except ValueError as e:
        raise ConfigError(str(e)) from e
    lesson_mod.configure(jit=cfg.jit, max_steps=cfg.max_steps, grid=cfg.grid)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _cmd_lessons_list(args: argparse.Namespace, cfg: Config) -> int:
    for name, lesson in lesson_mod.lessons().items():
        print(f"{name:<24}{lesson.date}  {lesson.title}")
    return 0


def _cmd_lessons_show(args: argparse.Namespace, cfg: Config) -> int:
    lesson = lesson_mod.get_lesson(args.name)
    print(f"{lesson.name} ({lesson.date}): {lesson.title}")
    if lesson.summary:
        print(f"  {lesson.summary}")
    for sec in lesson.sections:
        suffix = " [animated]" if sec.animate is not None else ""
        print(f"\n  [{sec.name}] {sec.title}{suffix}")
        for spec in sec.controls:
            print(f"    {spec.name}: {spec.describe()}")
        if sec.notes:
            print(f"    note: {sec.notes}")
    return 0


def _split_overrides(lesson, sections: List[str], overrides: Dict[str, str]) -> Dict[str, Dict[str, str]]:
    """Route each override to every selected section that has a control by that name."""
    per_section: Dict[str, Dict[str, str]] = {name: {} for name in sections}
    used = set()
    for sec_name in sections:
        names = {spec.name for spec in lesson.section(sec_name).controls}
        for key, value in overrides.items():
            if key in names:
                per_section[sec_name][key] = value
                used.add(key)
    unused = sorted(set(overrides) - used)
    if unused:
        raise ControlError(f"No selected section has a control named: {', '.join(unused)}.")
    return per_section


def _cmd_render(args: argparse.Namespace, cfg: Config) -> int:
    plt.switch_backend("Agg")
    lesson = lesson_mod.get_lesson(args.name)
    sections = [lesson.section(args.section).name] if args.section else lesson.section_names()
    overrides = _split_overrides(lesson, sections, _parse_sets(args.set))
    out_dir = Path(args.out if args.out else cfg.output_dir)
    fmts = _check_fmts(args.fmt) if args.fmt else cfg.fmts

    for sec_name in sections:
        fig = lesson.render(sec_name, overrides[sec_name])
        try:
            paths = export.savefig(fig, out_dir / f"{lesson.name}-{sec_name}", fmts=fmts, dpi=cfg.dpi)
        finally:
            plt.close(fig)
        for path in paths:
            print(path)
    return 0


def _cmd_open(args: argparse.Namespace, cfg: Config) -> int:
    lesson = lesson_mod.get_lesson(args.name)
    panel = lesson.panel(args.section)
    panel.show()
    return 0


def _cmd_animate(args: argparse.Namespace, cfg: Config) -> int:
    plt.switch_backend("Agg")
    if args.frames < 1:
        raise ControlError(f"--frames must be >= 1, got {args.frames}")
    fly = Firefly(
        Omega=args.omega_big,
        omega=args.omega,
        A=args.A,
        alpha=args.alpha,
        theta=args.theta,
    )
    anim = phase_animate(fly, frames=args.frames)
    out = Path(args.out) if args.out else Path(cfg.output_dir) / "firefly.gif"
    try:
        path = save_gif(anim, out, fps=args.fps)
    finally:
        plt.close(anim.figure)
    print(path)
    return 0


def _cmd_config_show(args: argparse.Namespace, cfg: Config) -> int:
    print(f"# {_get_config_path()}")
    for key, value in cfg.as_dict().items():
        print(f"{key} = {value!r}")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowlab",
        description="Interactive lessons on elementary dynamical systems.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_lessons = sub.add_parser("lessons", help="List and inspect lessons")
    lsub = p_lessons.add_subparsers(dest="lessons_command", required=True)
    p_list = lsub.add_parser("list", help="List lessons")
    p_list.set_defaults(func=_cmd_lessons_list)
    p_show = lsub.add_parser("show", help="Show the sections and controls of a lesson")
    p_show.add_argument("name")
    p_show.set_defaults(func=_cmd_lessons_show)

    p_render = sub.add_parser("render", help="Render lesson sections to image files")
    p_render.add_argument("name")
    p_render.add_argument("--section", help="Render only this section")
    p_render.add_argument("--set", action="append", metavar="NAME=VALUE", help="Override a control value")
    p_render.add_argument("--out", help="Output directory (default: config output_dir)")
    p_render.add_argument("--fmt", action="append", help="Output format; repeat for several")
    p_render.set_defaults(func=_cmd_render)

    p_open = sub.add_parser("open", help="Open a section in an interactive window")
    p_open.add_argument("name")
    p_open.add_argument("--section")
    p_open.set_defaults(func=_cmd_open)

    p_anim = sub.add_parser("animate", help="Write the firefly animation as a GIF")
    p_anim.add_argument("--omega-big", dest="omega_big", type=float, default=2.8, help="Flashlight frequency Ω")
    p_anim.add_argument("--omega", type=float, default=1.0, help="Firefly frequency ω")
    p_anim.add_argument("--A", dest="A", type=float, default=0.9, help="Coupling strength A")
    p_anim.add_argument("--alpha", type=float, default=math.pi / 3.0, help="Initial flashlight phase")
    p_anim.add_argument("--theta", type=float, default=0.0, help="Initial firefly phase")
    p_anim.add_argument("--frames", type=int, default=450)
    p_anim.add_argument("--fps", type=int, default=25)
    p_anim.add_argument("--out", help="Output path (default: <output_dir>/firefly.gif)")
    p_anim.set_defaults(func=_cmd_animate)

    p_config = sub.add_parser("config", help="Configuration")
    csub = p_config.add_subparsers(dest="config_command", required=True)
    p_cshow = csub.add_parser("show", help="Print the resolved configuration")
    p_cshow.set_defaults(func=_cmd_config_show)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    try:
        cfg = load_config()
        _apply_config(cfg)
        return int(args.func(args, cfg))
    except FlowlabError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
