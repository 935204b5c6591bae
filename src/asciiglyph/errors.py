class ConversionError(Exception):
    """Base class for failures that abort an image-to-ASCII conversion."""


class DimensionError(ConversionError):
    """The planned character grid has non-positive or non-finite dimensions."""


class ResampleError(ConversionError):
    """The image could not be resized to the planned grid."""


class SamplingError(ConversionError):
    """Pixel data could not be read from the raster."""


class FontResolutionFailure(Exception):
    """A named font is not installed. Recovered by substituting a monospaced font."""
