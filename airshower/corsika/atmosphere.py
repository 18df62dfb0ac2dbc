""" Atmospheric depth and height in CORSIKA atmospheres

    CORSIKA models the atmosphere as 5 layers. In the lower 4 layers the
    mass overburden (depth) follows an exponential in the height, in the
    top layer it decreases linearly::

        X(h) = a_i + b_i * exp(-h / c_i)    for h_i <= h < h_i+1, i < 4
        X(h) = a_4 - b_4 * h / c_4          for h >= h_4

    As specified in the CORSIKA user manual, Appendix D. The layer
    parameters are written to the run header, so the atmosphere of a
    simulation can be recreated from its output file::

        atmosphere = CorsikaAtmosphere.from_file('CER000001')
        depth = atmosphere.depth(1e6)  # g/cm**2 at 10 km

    Heights are in cm, depths in g/cm**2, densities in g/cm**3.
    Heights below the lowest layer and depths above the total depth of
    the atmosphere have no valid result, -1 is returned for those.

"""
import logging
import math

import numpy

from .errors import OutOfDomain
from .reader import CorsikaFile
from ..utils import ERR

logger = logging.getLogger('airshower.corsika.atmosphere')

N_LAYERS = 5


class CorsikaAtmosphere(object):

    """Conversion between height and atmospheric depth

    :param heights: lower boundaries of the 5 layers (cm).
    :param a,b,c: parameters of the depth formula of each layer.

    """

    def __init__(self, heights, a, b, c):
        self.heights = numpy.array(heights, dtype=float)
        self.a = numpy.array(a, dtype=float)
        self.b = numpy.array(b, dtype=float)
        self.c = numpy.array(c, dtype=float)
        self.depths = numpy.array([])
        self.good = True
        self.error = None

        if any(len(p) != N_LAYERS
               for p in (self.heights, self.a, self.b, self.c)):
            self._fail(OutOfDomain('The atmosphere needs parameters for %d '
                                   'layers.' % N_LAYERS))
            return
        if not (numpy.all(numpy.diff(self.heights) > 0) and
                numpy.all(self.b != 0) and numpy.all(self.c != 0)):
            self._fail(OutOfDomain('Invalid atmospheric layers: heights %s, '
                                   'b %s, c %s' % (self.heights, self.b,
                                                   self.c)))
            return

        # Depth at the lower boundary of each layer
        self.depths = numpy.array([self.depth(h) for h in self.heights])
        if not numpy.all(numpy.diff(self.depths) < 0):
            self._fail(OutOfDomain('Depth does not decrease with height for '
                                   'layer boundaries %s' % self.heights))

    @classmethod
    def from_run_header(cls, header):
        """Create the atmosphere of a run

        :param header: RunHeader instance, an invalid atmosphere is
                       returned for None.

        """
        if header is None:
            return cls([], [], [], [])
        return cls(header.atmospheric_layer_boundaries, header.a_atmospheric,
                   header.b_atmospheric, header.c_atmospheric)

    @classmethod
    def from_file(cls, filename):
        """Create the atmosphere from the run header of a CORSIKA file"""

        with CorsikaFile(filename) as corsika_file:
            return cls.from_run_header(corsika_file.get_header())

    @property
    def layers(self):
        """List of (height, depth, a, b, c) tuples, from the ground up"""

        return list(zip(self.heights, self.depths, self.a, self.b, self.c))

    def check(self):
        """Raise the stored failure, if any"""

        if not self.good:
            raise self.error
        return True

    def depth(self, height):
        """Atmospheric depth (g/cm**2) at a given height (cm)

        :return: the depth, -1 below the lowest layer.

        """
        h, a, b, c = self.heights, self.a, self.b, self.c

        if not self.good or height < h[0]:
            logger.debug('Height %s outside of the atmosphere.', height)
            return ERR[0]
        elif height >= h[4]:
            return a[4] - b[4] * height / c[4]

        for i in range(N_LAYERS - 1):
            if h[i] <= height < h[i + 1]:
                return a[i] + b[i] * math.exp(-height / c[i])
        return ERR[0]

    def height(self, depth):
        """Height (cm) at a given atmospheric depth (g/cm**2)

        :return: the height, -1 for depths larger than the total depth
                 of the atmosphere.

        """
        height = self._height(depth)
        if height is None:
            logger.debug('Depth %s outside of the atmosphere.', depth)
            return ERR[0]
        return height

    def density_vs_height(self, height):
        """Density of the atmosphere (g/cm**3) at a given height (cm)

        This is the decrease in depth per unit of height.

        """
        h, b, c = self.heights, self.b, self.c

        if not self.good or height < h[0]:
            return ERR[0]
        elif height >= h[4]:
            return b[4] / c[4]

        for i in range(N_LAYERS - 1):
            if h[i] <= height < h[i + 1]:
                return b[i] / c[i] * math.exp(-height / c[i])
        return ERR[0]

    def density_vs_depth(self, depth):
        """Density of the atmosphere (g/cm**3) at a given depth"""

        height = self._height(depth)
        if height is None:
            return ERR[0]
        return self.density_vs_height(height)

    def _height(self, depth):
        """Height at a depth, None where there is no valid height"""

        d, a, b, c = self.depths, self.a, self.b, self.c

        if not self.good or depth > d[0]:
            return None
        elif depth <= d[4]:
            return c[4] * (a[4] - depth) / b[4]

        for i in range(N_LAYERS - 1):
            if d[i] >= depth > d[i + 1]:
                if (depth - a[i]) * b[i] <= 0:
                    return None
                return c[i] * math.log(b[i] / (depth - a[i]))
        return None

    def _fail(self, error):
        self.good = False
        self.error = error
        logger.error('%s', error)
