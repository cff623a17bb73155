import logging


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging for stampede.

    Log records always go to stderr so they never mix with task output on
    stdout. ``verbose`` lowers the level from WARNING to DEBUG.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s - %(message)s",
    )
