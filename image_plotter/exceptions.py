"""
Custom exceptions for plot requests.
Separates source access failures from decode, encode and font problems.
"""


class PlotError(Exception):
    """Base exception for plotting errors"""
    pass


class SourceUnavailable(PlotError):
    """File or network source could not be read"""
    pass


class DecodeFailed(PlotError):
    """Source bytes are not a decodable image"""
    pass


class UnsupportedFormat(PlotError):
    """Detected format cannot be re-encoded (only JPEG and PNG are)"""
    pass


class FontLoadFailed(PlotError):
    """Label font could not be loaded; callers degrade to border-only"""
    pass
