"""Exception types raised by Strata."""


class StrataError(Exception):
    """Base class for Strata errors."""


class AssetLoadError(StrataError):
    """A layer image could not be read or decoded.

    Recovered by the compositor: the layer is skipped for that edition.
    """


class ExportError(StrataError):
    """Encoding an image or writing an archive failed.

    Terminal for the export operation that raised it.
    """
