"""
Exception classes for clozepair.

All clozepair exceptions inherit from ClozePairError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     store.toggle_selection("missing", TextField.SOURCE, target)
    ... except clozepair.PairNotFoundError as e:
    ...     print(f"No such pair: {e}")
    ... except clozepair.ClozePairError as e:
    ...     print(f"clozepair error: {e}")
"""


class ClozePairError(Exception):
    """
    Base exception for all clozepair errors.

    Catch this to handle any clozepair-specific error.
    """

    pass


class ConfigurationError(ClozePairError, ValueError):
    """
    Raised for invalid configuration.

    Example:
        >>> SessionConfig(on_segmentation_failure="guess")
        ConfigurationError: on_segmentation_failure must be one of ('empty', 'raise')
    """

    pass


class OCRError(ClozePairError):
    """
    Raised when the OCR collaborator cannot produce text for an image.

    The pair store catches this per image: the image slot is marked failed
    and the other images keep processing.
    """

    pass


class SegmentationError(ClozePairError):
    """
    Raised when OCR text cannot be split into source and translation.

    Only raised when SessionConfig.on_segmentation_failure == "raise".
    Otherwise an empty pair is stored and a warning is logged.
    """

    pass


class SelectionError(ClozePairError, ValueError):
    """
    Raised for a malformed selection target.

    Example:
        >>> select_word("Yo tengo un gato.", 7)
        SelectionError: word index 7 out of range for 4 tokens
    """

    pass


class PairNotFoundError(ClozePairError, KeyError):
    """Raised when a pair id is not present in the store."""

    pass
