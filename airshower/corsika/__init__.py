"""Read CORSIKA simulation output.

This package contains modules for working with CORSIKA simulations:

:mod:`~airshower.corsika.atmosphere`
    convert between height and atmospheric depth

:mod:`~airshower.corsika.blocks`
    classes for the block and subblocks in CORSIKA data

:mod:`~airshower.corsika.errors`
    the kinds of failures the readers report

:mod:`~airshower.corsika.longitudinal`
    read the longitudinal profiles of CORSIKA showers

:mod:`~airshower.corsika.particles`
    convert CORSIKA particle codes to common names

:mod:`~airshower.corsika.reader`
    read CORSIKA binary data files into Python

"""
from . import atmosphere
from . import blocks
from . import errors
from . import longitudinal
from . import particles
from . import reader


__all__ = ['atmosphere',
           'blocks',
           'errors',
           'longitudinal',
           'particles',
           'reader']
