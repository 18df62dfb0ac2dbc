""" Read CORSIKA longitudinal profile files.

    CORSIKA writes the longitudinal development of each shower to the
    ``DATnnnnnn.long`` text file: a table with the number of particles
    per depth step, a table with the energy deposit per depth step and
    the Gaisser-Hillas fit to the charged particle profile.

    The whole file is read when a :class:`CorsikaLong` is created,
    after that the profiles can be looked up by shower ID or by the
    position of the shower in the file::

        long_file = CorsikaLong('DAT000001.long')
        for n in range(long_file.n_showers):
            xmax = long_file.get_xmax_by_number(n)
            electrons = long_file.get_profile_by_number(n, 3)

    The depth steps are either vertical or along the shower axis
    (slant), as given by ``slant``.

"""
import logging

import numpy

from .errors import OpenFailure, MissingSentinel, OutOfRange, TruncatedRead
from ..utils import ERR

logger = logging.getLogger('airshower.corsika.longitudinal')

#: Token that opens the profile tables of each shower
MARKER = 'LONGITUDINAL'
#: Token that marks depth steps as vertical
VERTICAL = 'VERTICAL'

#: Number of columns in each table, the depth included
N_CATEGORIES = 10
#: Number of values in the Gaisser-Hillas fit: P1 to P6, chi2/dof and
#: the average deviation
N_FIT_PARAMETERS = 8

PARTICLE_COLUMNS = ('depth', 'gammas', 'positrons', 'electrons', 'mu_p',
                    'mu_m', 'hadrons', 'charged', 'nuclei', 'cherenkov')
DEPOSIT_COLUMNS = ('depth', 'gamma', 'em_ioniz', 'em_cut', 'mu_ioniz',
                   'mu_cut', 'hadron_ioniz', 'hadron_cut', 'neutrino', 'sum')

# Number of text tokens between the values of interest
SKIP_BEFORE_STEPS = 2
SKIP_BEFORE_ID = 7
SKIP_COLUMN_NAMES = 10
SKIP_BEFORE_DEPOSIT = 29
SKIP_BEFORE_FIT = 19
SKIP_BEFORE_CHI2 = 2
SKIP_BEFORE_DEVIATION = 5


class ShowerProfile(object):

    """The longitudinal profiles of one shower

    :param shower_id: the shower (event) number.
    :param particles: array (10, n_steps) with the particle numbers,
                      row 0 holds the depths.
    :param deposit: array (10, n_steps) with the energy deposits,
                    row 0 holds the depths.
    :param fit: the 8 values of the Gaisser-Hillas fit.

    """

    def __init__(self, shower_id, particles, deposit, fit):
        self.shower_id = shower_id
        self.particles = particles
        self.deposit = deposit
        self.fit = fit
        for array in (self.particles, self.deposit, self.fit):
            array.flags.writeable = False

    @property
    def n_steps(self):
        return self.particles.shape[1]

    @property
    def xmax(self):
        """Depth of the shower maximum from the fit (g/cm**2)"""

        return self.fit[2]


class CorsikaLong(object):

    """CORSIKA longitudinal file handler

    The lookups never raise. Unknown showers and categories outside
    0-9 give empty arrays, or -1 for single values, and log a warning.
    The last failed lookup is kept in ``lookup_error``, it does not
    change ``good``.

    """

    def __init__(self, filename):
        """CorsikaLong constructor

        :param filename: the filename of the .long file

        """
        self._filename = filename
        self._ids = []
        self._profiles = {}
        self.slant = False
        self.good = True
        self.error = None
        self.lookup_error = None

        try:
            with open(self._filename, encoding='ascii',
                      errors='replace') as long_file:
                tokens = long_file.read().split()
        except OSError as exc:
            self._fail(OpenFailure('Could not open longitudinal file %s: %s'
                                   % (self._filename, exc)))
            return

        if not tokens or tokens[0] != MARKER:
            self._fail(MissingSentinel('The file %s is not a valid CORSIKA '
                                       'long file.' % self._filename))
            return

        # LONGITUDINAL DISTRIBUTION IN <n> VERTICAL STEPS ...
        self.slant = len(tokens) < 5 or tokens[4] != VERTICAL

        self._parse(tokens)
        logger.debug('Read profiles of %d showers from %s.', self.n_showers,
                     self._filename)

    def check(self):
        """Raise the stored failure, if any"""

        if not self.good:
            raise self.error
        return True

    @property
    def n_showers(self):
        return len(self._ids)

    @property
    def ids(self):
        """Shower IDs in the order of the file"""

        return tuple(self._ids)

    def get_id(self, n):
        """Get the ID of the n-th shower in the file, -1 if absent"""

        if n < 0 or n >= len(self._ids):
            self._miss(OutOfRange('No ID available for the %d-th shower.'
                                  % n))
            return ERR[0]
        return self._ids[n]

    def get_shower(self, shower_id):
        """Get all profiles of a shower

        :return: ShowerProfile instance, None for unknown showers.

        """
        return self._profiles.get(shower_id)

    def get_profile(self, shower_id, category):
        """Get a particle number profile

        :param shower_id: the shower ID.
        :param category: column index 0-9, see PARTICLE_COLUMNS.
        :return: array with a value per depth step.

        """
        return self._get_column(shower_id, category, 'particles')

    def get_deposit_profile(self, shower_id, category):
        """Get an energy deposit profile

        :param shower_id: the shower ID.
        :param category: column index 0-9, see DEPOSIT_COLUMNS.
        :return: array with a value per depth step.

        """
        return self._get_column(shower_id, category, 'deposit')

    def get_depths(self, shower_id):
        return self.get_profile(shower_id, 0)

    def get_fit(self, shower_id):
        """Get the Gaisser-Hillas fit parameters

        :return: array with P1-P6, chi2/dof and the average deviation.

        """
        profile = self._lookup(shower_id)
        if profile is None:
            return numpy.array([])
        return profile.fit

    def get_xmax(self, shower_id):
        profile = self._lookup(shower_id)
        if profile is None:
            return ERR[0]
        return profile.xmax

    def get_profile_by_number(self, n, category):
        return self.get_profile(self.get_id(n), category)

    def get_deposit_profile_by_number(self, n, category):
        return self.get_deposit_profile(self.get_id(n), category)

    def get_fit_by_number(self, n):
        return self.get_fit(self.get_id(n))

    def get_xmax_by_number(self, n):
        return self.get_xmax(self.get_id(n))

    @staticmethod
    def column_name(plane, category):
        """Name of a column

        :param plane: 0 for particle numbers, 1 for energy deposits.
        :param category: column index 0-9.
        :return: the name, or an empty string for invalid input.

        """
        if category < 0 or category >= N_CATEGORIES:
            return ''
        if plane == 0:
            return PARTICLE_COLUMNS[category]
        elif plane == 1:
            return DEPOSIT_COLUMNS[category]
        else:
            return ''

    def _lookup(self, shower_id):
        profile = self._profiles.get(shower_id)
        if profile is None:
            self._miss(OutOfRange('No data available for shower with ID %s.'
                                  % shower_id))
        return profile

    def _get_column(self, shower_id, category, plane):
        profile = self._lookup(shower_id)
        if profile is None:
            return numpy.array([])
        if category < 0 or category >= N_CATEGORIES:
            self._miss(OutOfRange('Category should be between 0 and %d. '
                                  'Value given is %d.'
                                  % (N_CATEGORIES - 1, category)))
            return numpy.array([])
        return getattr(profile, plane)[category]

    def _parse(self, tokens):
        stream = iter(tokens)
        for token in stream:
            # Check if we have a new shower
            if token != MARKER:
                continue
            try:
                profile = self._read_shower(stream)
            except (StopIteration, ValueError) as exc:
                self._fail(TruncatedRead(
                    'Incomplete profiles after %d showers in %s: %r'
                    % (len(self._ids), self._filename, exc)))
                return
            self._ids.append(profile.shower_id)
            self._profiles[profile.shower_id] = profile

    def _read_shower(self, stream):
        """Read the tables and fit following a MARKER token"""

        def discard(n):
            for _ in range(n):
                next(stream)

        discard(SKIP_BEFORE_STEPS)
        n_steps = int(next(stream))
        discard(SKIP_BEFORE_ID)
        shower_id = int(next(stream))
        discard(SKIP_COLUMN_NAMES)

        tables = []
        for plane in range(2):
            values = [float(next(stream))
                      for _ in range(n_steps * N_CATEGORIES)]
            # rows are depth steps, store columns as rows
            tables.append(numpy.array(values).reshape(n_steps,
                                                      N_CATEGORIES).T.copy())
            if plane == 0:
                discard(SKIP_BEFORE_DEPOSIT)

        discard(SKIP_BEFORE_FIT)
        fit = []
        for i in range(N_FIT_PARAMETERS):
            if i == 6:
                discard(SKIP_BEFORE_CHI2)
            elif i == 7:
                discard(SKIP_BEFORE_DEVIATION)
            fit.append(float(next(stream)))

        return ShowerProfile(shower_id, tables[0], tables[1], numpy.array(fit))

    def _miss(self, error):
        self.lookup_error = error
        logger.warning('%s', error)

    def _fail(self, error):
        self.good = False
        self.error = error
        logger.error('%s', error)
