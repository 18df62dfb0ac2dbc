"""Failure kinds for reading CORSIKA output

The readers in this package do not raise these exceptions while reading.
Each reader stores the failure it ran into in its ``error`` attribute,
sets ``good`` to False and stops reading.  Call ``check()`` on a reader
to have the stored failure raised instead.

::

    CorsikaError
    ├── OpenFailure             # file could not be opened
    ├── LayoutDetectionFailure  # unknown block size or no EVTH at probe
    ├── MissingSentinel         # expected tag or marker not found
    ├── TruncatedRead           # short read or early end of the data
    ├── OutOfRange              # bad category index or unknown shower
    └── OutOfDomain             # height or depth outside the atmosphere

"""


class CorsikaError(Exception):
    """Base class for all failures of the CORSIKA readers"""


class OpenFailure(CorsikaError):
    """The file could not be opened for reading"""


class LayoutDetectionFailure(CorsikaError):
    """The block layout of a binary file was not recognized

    Only the unthinned (22932 bytes) and thinned (26208 bytes) block
    sizes are supported, with or without block length markers.

    """


class MissingSentinel(CorsikaError):
    """An expected sub-block tag or text marker was not found"""


class TruncatedRead(CorsikaError):
    """The data ended, or could not be read, before it was complete"""


class OutOfRange(CorsikaError):
    """A lookup used an unknown shower or an invalid category index"""


class OutOfDomain(CorsikaError):
    """A height or depth lies outside the modeled atmosphere"""
