"""Decoding of cosmic-ray air-shower simulations

This package reads the output of the `CORSIKA
<https://www.iap.kit.edu/corsika/>`_ air-shower simulation: the binary
particle or Cherenkov photon files, the longitudinal profile files and
the atmosphere used in the simulation.  Filling histograms, writing
output files and plotting are left to the caller.

The following packages and modules are included:

:mod:`~airshower.corsika`
    package containing the CORSIKA readers

:mod:`~airshower.tests`
    code tests

:mod:`~airshower.utils`
    error values and a progressbar

"""
from . import corsika, tests, utils
from .corsika.atmosphere import CorsikaAtmosphere
from .corsika.longitudinal import CorsikaLong
from .corsika.reader import CorsikaFile, CorsikaShower
from .tests import run_tests

__all__ = [
    'CorsikaAtmosphere',
    'CorsikaFile',
    'CorsikaLong',
    'CorsikaShower',
    'corsika',
    'run_tests',
    'tests',
    'utils',
]
