import os
import sys
from argparse import ArgumentParser
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

from mandelbrot_ppm import BACKENDS, RenderConfig, render_frame

_DEFAULTS = RenderConfig()


def select_device():
    """Use the first visible GPU when there is one, otherwise the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        # Memory growth can only be configured before the GPUs are initialized.
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set as a grayscale plain-text PPM image.')

    parser.add_argument('--size', type=int,
                        dest='size', help='width and height of the square raster in pixels',
                        metavar='SIZE', default=_DEFAULTS.size)

    parser.add_argument('--re-start', type=float,
                        dest='re_start', help='real coordinate of the left edge of the sample window',
                        metavar='RE_START', default=_DEFAULTS.re_range[0])

    parser.add_argument('--re-end', type=float,
                        dest='re_end', help='real coordinate of the right edge of the sample window',
                        metavar='RE_END', default=_DEFAULTS.re_range[1])

    parser.add_argument('--im-start', type=float,
                        dest='im_start', help='imaginary coordinate of the top edge of the sample window',
                        metavar='IM_START', default=_DEFAULTS.im_range[0])

    parser.add_argument('--im-end', type=float,
                        dest='im_end', help='imaginary coordinate of the bottom edge of the sample window',
                        metavar='IM_END', default=_DEFAULTS.im_range[1])

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration bound; also the brightest possible gray level (at most 255)',
                        metavar='MAX_ITERATIONS', default=_DEFAULTS.max_iterations)

    parser.add_argument('--escape-threshold', type=float,
                        dest='escape_threshold', help='squared magnitude above which a point counts as escaped',
                        metavar='ESCAPE_THRESHOLD', default=_DEFAULTS.escape_threshold)

    parser.add_argument('--output', type=str,
                        dest='output', help='path of the PPM file to write',
                        metavar='OUTPUT', default=str(_DEFAULTS.output_path))

    parser.add_argument('--comment', type=str,
                        dest='comment', help='text of the comment line written after the P3 magic number',
                        metavar='COMMENT', default=_DEFAULTS.comment)

    parser.add_argument('--no-comment', dest='no_comment', action='store_true',
                        help='Omit the comment line from the image header.')

    parser.add_argument('--backend', choices=BACKENDS, default='tensorflow',
                        help='"scalar" evaluates one pixel at a time; "tensorflow" evaluates the whole grid in one batch.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def config_from_args(opt, parser: ArgumentParser) -> RenderConfig:
    output = Path(opt.output).expanduser()
    if output.exists() and output.is_dir():
        parser.error("--output must point to a file, not a directory.")

    try:
        return RenderConfig(
            size=opt.size,
            re_range=(opt.re_start, opt.re_end),
            im_range=(opt.im_start, opt.im_end),
            max_iterations=opt.max_iterations,
            escape_threshold=opt.escape_threshold,
            output_path=output,
            comment=None if opt.no_comment else opt.comment,
        )
    except ValueError as exc:
        parser.error(str(exc))


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = config_from_args(opt, parser)
    log("TensorFlow version: %s" % tf.__version__)

    device = select_device() if opt.backend == 'tensorflow' else None

    def report(done, total):
        print("column {0} out of {1}".format(done, total), end='\r')

    log("Rendering {0}x{0} pixels with the {1} backend".format(config.size, opt.backend))
    image = render_frame(config, backend=opt.backend, device=device, progress=report)
    print()

    try:
        path = image.save_to_file(config.output_path)
    except OSError as exc:
        raise SystemExit("couldn't write image file {0}: {1}".format(config.output_path, exc)) from exc

    log("Wrote %s" % path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
