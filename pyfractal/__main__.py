import argparse
import sys

from .config import COLOR_MODES, GRADIENT, ViewerConfig
from .report import fatal


def build_parser() -> argparse.ArgumentParser:
    defaults = ViewerConfig()
    parser = argparse.ArgumentParser(
        prog="pyfractal",
        description="Click into the Mandelbrot set to re-center and zoom",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--dims",
        type=int,
        default=[defaults.width, defaults.height],
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        help="The dimensions of the window, in pixels",
    )
    parser.add_argument(
        "--title",
        default=defaults.title,
        help="The window title",
    )
    parser.add_argument(
        "--center",
        type=float,
        default=list(defaults.center),
        nargs=2,
        metavar=("RE", "IM"),
        help="The plane coordinate shown at the middle of the first frame",
    )
    parser.add_argument(
        "--zoom",
        type=float,
        default=defaults.zoom,
        help="The initial magnification",
    )
    parser.add_argument(
        "--imax",
        type=int,
        default=defaults.iterations,
        help="the max iterations for the first frame",
    )
    parser.add_argument(
        "--imax-step",
        type=int,
        default=defaults.iteration_gap,
        help="how many iterations to add on every zoom",
    )
    parser.add_argument(
        "--zoom-factor",
        type=float,
        default=defaults.zoom_factor,
        help="the magnification applied on every click (must be > 1)",
    )
    parser.add_argument(
        "--color-mode",
        choices=COLOR_MODES,
        default=GRADIENT,
        help="gradient blends dark->light by hue, grayscale shades by count",
    )
    parser.add_argument(
        "--dark-color",
        default=defaults.dark_color,
        help="gradient color at hue 0 (any Pillow color string)",
    )
    parser.add_argument(
        "--light-color",
        default=defaults.light_color,
        help="gradient color at hue 1 (any Pillow color string)",
    )
    parser.add_argument(
        "--interior-color",
        default=None,
        help="color for points that never escape (default: dark color, black in grayscale)",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=defaults.fps,
        help="the target frame rate of the render loop",
    )
    parser.add_argument(
        "--background",
        action="store_true",
        help="regenerate on a worker thread so the window keeps drawing",
    )
    parser.add_argument(
        "--screenshot",
        default=None,
        metavar="PATH",
        help="save the last frame to this image file on exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="print dropped clicks and timing details",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ViewerConfig:
    return ViewerConfig(
        width=args.dims[0],
        height=args.dims[1],
        title=args.title,
        center=(args.center[0], args.center[1]),
        zoom=args.zoom,
        iterations=args.imax,
        iteration_gap=args.imax_step,
        zoom_factor=args.zoom_factor,
        color_mode=args.color_mode,
        dark_color=args.dark_color,
        light_color=args.light_color,
        interior_color=args.interior_color,
        fps=args.fps,
        background=args.background,
        verbose=args.verbose,
        screenshot=args.screenshot,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args).validate()
    except ValueError as e:
        fatal(e)
        return 1

    print(f"window: {config.width}x{config.height}")
    print(f"center: {config.center}")
    print(f"imax: {config.iterations} (+{config.iteration_gap} per zoom)")
    print(f"zoom factor: {config.zoom_factor}")

    # Imported late so --help works without a display
    import pygame
    from .viewer import FractalViewer

    try:
        FractalViewer(config).run()
    except (pygame.error, RuntimeError, ValueError) as e:
        fatal(e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
