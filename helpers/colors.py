import sys
import os

class Colors(object):
    PROMPT = "\033[94m"
    SUCCESS = "\033[92m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"


def supports_color(stream=None):
    """
    Check whether a stream is a terminal that can display colors.

    Parameters
    ----------
    stream : file-like, optional
        The stream that will be written to. Defaults to ``sys.stdout``.

    Returns
    -------
    colors_supported : bool
        Whether ANSI colors should be used on that stream.
    """

    stream = stream or sys.stdout
    if "NO_COLOR" in os.environ:
        return False
    supported = sys.platform != "win32" or "ANSICON" in os.environ

    atty_connected = hasattr(stream, "isatty") and stream.isatty()
    return supported and atty_connected


def colorize(text, color, stream=None):
    """
    Wrap a string in a color prefix and reset suffix.

    The text is returned unchanged when ``stream`` is not a color terminal,
    so redirected output never carries escape codes.

    Parameters
    ----------
    text : str
        The message to display.
    color : str
        One of the :class:`Colors` prefixes.
    stream : file-like, optional
        The stream the text is destined for.

    Returns
    -------
    wrapped_str : str
    """

    if not supports_color(stream):
        return text

    return color + text + Colors.ENDC


def print_info(text):
    """Print a progress message on stderr, keeping stdout for hosts output."""
    sys.stderr.write(colorize(text, Colors.PROMPT, sys.stderr) + "\n")


def print_success(text):
    sys.stderr.write(colorize(text, Colors.SUCCESS, sys.stderr) + "\n")


def print_failure(text):
    """
    Print a failure message on stderr.

    Parameters
    ----------
    text : str
        The message to display.
    """

    sys.stderr.write(colorize(text, Colors.FAIL, sys.stderr) + "\n")
