"""
Classes corresponding to CORSIKA blocks and sub-blocks

The classes in this module correspond one-to-one with the sub-blocks
(and blocks) as specified in the CORSIKA users manual.  Each record is
decoded once, right after its sub-block is read, and keeps the flat
sub-block as ``subblock`` so any word can still be reached by its
offset::

    header = RunHeader(subblock)
    header.n_showers == header[92]

Values are kept in CORSIKA units (cm, GeV, rad, g/cm**2).

"""
import struct

import numpy

from . import particles
from .errors import MissingSentinel


#: Sub-block tags, the first word of a sub-block read as ASCII.
RUN_HEADER = b'RUNH'
RUN_END = b'RUNE'
EVENT_HEADER = b'EVTH'
EVENT_END = b'EVTE'
LONGITUDINAL = b'LONG'


# All sizes are in bytes

class Format(object):

    """The binary format information of the file.

    As specified in the CORSIKA user manual, Section 10.2.1.

    """

    def __init__(self):
        # one field is a single precision float
        self.field_size = struct.calcsize('f')
        self.dtype = numpy.dtype('=f4')

        # one block contains 21 sub-blocks of 273 fields, with the
        # length markers (if any) one extra field before and after
        self.block_size = 22932
        self.block_padding_size = struct.calcsize('i')
        self.subblocks_per_block = 21

        # the first field of a sub-block _might_ be a string id.
        self.words_per_subblock = (self.block_size //
                                   (self.field_size *
                                    self.subblocks_per_block))
        self.subblock_size = self.words_per_subblock * self.field_size

        # Each particle record sub-block contains a fixed
        # number of particle records
        # With the unthinned option, each of these is 7 fields long
        # for a total of 39 records per sub block
        self.thinning = False
        self.fields_per_particle = 7
        self.particle_size = self.fields_per_particle * self.field_size
        self.particles_per_subblock = 39


class FormatThin(Format):

    """The format information of the thinned file

    As specified in CORSIKA user manual, Section 10.2.2.

    """

    def __init__(self):
        super(FormatThin, self).__init__()

        # 21 sub-blocks of 312 fields
        self.block_size = 26208
        self.words_per_subblock = (self.block_size //
                                   (self.field_size *
                                    self.subblocks_per_block))
        self.subblock_size = self.words_per_subblock * self.field_size

        # With the thinned option each particle record has an extra
        # field for the weight
        self.thinning = True
        self.fields_per_particle = 8
        self.particle_size = self.fields_per_particle * self.field_size


def format_for_block_size(block_size):
    """Get the format belonging to a physical block size

    :param block_size: size of a block in bytes, without length markers.
    :return: a Format or FormatThin instance, None for unknown sizes.

    """
    for cls in (Format, FormatThin):
        format = cls()
        if format.block_size == block_size:
            return format
    return None


def subblock_tag(subblock):
    """Get the tag of a sub-block

    :param subblock: array of fields as read from the file.
    :return: the first four bytes, e.g. b'EVTH'. Particle sub-blocks
             give meaningless bytes, empty input gives b''.

    """
    if subblock is None or len(subblock) == 0:
        return b''
    return subblock[:1].tobytes()


class SubBlock(object):

    """Named access to a tagged sub-block

    Subclasses set ``tag`` and decode their fields in ``__init__``.

    """

    tag = None

    def __init__(self, subblock):
        found = subblock_tag(subblock)
        if found != self.tag:
            raise MissingSentinel('Expected a %s sub-block, found %r'
                                  % (self.tag.decode(), found))
        self.subblock = subblock
        self.id = found

    def __getitem__(self, n):
        return float(self.subblock[n])

    def __len__(self):
        return len(self.subblock)


class RunHeader(SubBlock):

    """The run header sub-block

    As specified in the CORSIKA user manual, Table 7.

    """

    tag = RUN_HEADER

    def __init__(self, subblock):
        super(RunHeader, self).__init__(subblock)
        self.run_number = int(subblock[1])
        self.date_start = int(subblock[2])
        self.version = float(subblock[3])

        self.n_observation_levels = int(subblock[4])
        self.observation_heights = numpy.array(subblock[5:15], dtype=float)

        self.spectral_slope = float(subblock[15])
        self.min_energy = float(subblock[16])
        self.max_energy = float(subblock[17])

        self.n_showers = int(subblock[92])

        self.atmospheric_layer_boundaries = numpy.array(subblock[249:254],
                                                        dtype=float)
        self.a_atmospheric = numpy.array(subblock[254:259], dtype=float)
        self.b_atmospheric = numpy.array(subblock[259:264], dtype=float)
        self.c_atmospheric = numpy.array(subblock[264:269], dtype=float)

    @property
    def atmospheric_layers(self):
        """List of (height, a, b, c) tuples, from the ground up"""

        return list(zip(self.atmospheric_layer_boundaries,
                        self.a_atmospheric, self.b_atmospheric,
                        self.c_atmospheric))


class RunEnd(SubBlock):

    """The run end sub-block

    As specified in the CORSIKA user manual, Table 14.

    """

    tag = RUN_END

    def __init__(self, subblock):
        super(RunEnd, self).__init__(subblock)
        self.run_number = int(subblock[1])
        self.n_events_processed = int(subblock[2])


class EventHeader(SubBlock):

    """The event header sub-block

    As specified in the CORSIKA user manual, Table 8.

    """

    tag = EVENT_HEADER

    def __init__(self, subblock):
        super(EventHeader, self).__init__(subblock)
        self.event_number = int(subblock[1])
        self.particle_id = int(subblock[2])
        self.energy = float(subblock[3])
        self.starting_altitude = float(subblock[4])
        self.first_target = float(subblock[5])
        self.first_interaction_altitude = float(subblock[6])
        self.p_x = float(subblock[7])
        self.p_y = float(subblock[8])
        self.p_z = float(subblock[9])
        self.zenith = float(subblock[10])
        # CORSIKA azimuth: direction the momentum points to, North is 0
        self.azimuth = float(subblock[11])

        self.run_number = int(subblock[43])
        self.date_start = int(subblock[44])
        self.version = float(subblock[45])

        self.n_observation_levels = int(subblock[46])
        self.observation_heights = numpy.array(subblock[47:57], dtype=float)

        self.magnetic_field_x = float(subblock[70])
        self.magnetic_field_z = float(subblock[71])

        self.flag_hadron_model_low = int(subblock[74])
        self.flag_hadron_model_high = int(subblock[75])
        self.flag_Cherenkov = int(subblock[76])
        self.flag_curved = int(subblock[78])

        self.cherenkov_bunch = float(subblock[84])
        self.cherenkov_wavelength_min = float(subblock[95])
        self.cherenkov_wavelength_max = float(subblock[96])
        self.uses_of_Cherenkov_event = int(subblock[97])

        self.energy_fraction_thinning_hadronic = float(subblock[147])
        self.energy_fraction_thinning_em = float(subblock[148])
        self.weightlimit_thinning_hadronic = float(subblock[149])
        self.weightlimit_thinning_em = float(subblock[150])
        self.radial_thinning_max_radius = float(subblock[151])

    @property
    def particle(self):
        return particles.name(self.particle_id)

    @property
    def hadron_model_low(self):
        hadron_models_low = {1: 'GHEISHA', 2: 'UrQMD', 3: 'FLUKA'}
        return hadron_models_low.get(self.flag_hadron_model_low, 'unknown')

    @property
    def hadron_model_high(self):
        hadron_models_high = {0: 'HDPM', 1: 'VENUS', 2: 'SIBYLL', 3: 'QGSJET',
                              4: 'DPMJET', 5: 'NEXUS', 6: 'EPOS'}
        return hadron_models_high.get(self.flag_hadron_model_high, 'unknown')


class EventEnd(SubBlock):

    """The event end sub-block

    As specified in the CORSIKA user manual, Table 13.

    """

    tag = EVENT_END

    def __init__(self, subblock):
        super(EventEnd, self).__init__(subblock)
        self.event_number = int(subblock[1])

        self.n_photons_levels = float(subblock[2])
        self.n_electrons_levels = float(subblock[3])
        self.n_hadrons_levels = float(subblock[4])
        self.n_muons_levels = float(subblock[5])
        self.n_particles_levels = float(subblock[6])

        # Longitudinal distribution
        self.longitudinal_parameters = numpy.array(subblock[255:261],
                                                   dtype=float)
        self.chi2_longitudinal_fit = float(subblock[261])


class CherenkovData(object):

    """A Cherenkov photon bunch record

    As specified in CORSIKA user manual, Table 11.

    """

    def __init__(self, record):
        self.photons_in_bunch = float(record[0])
        self.x = float(record[1])
        self.y = float(record[2])
        self.u = float(record[3])
        self.v = float(record[4])
        self.t = float(record[5])
        self.production_height = float(record[6])


class CherenkovDataThin(CherenkovData):

    """The thinned Cherenkov photon bunch record

    Same as :class:`CherenkovData` with the thinning weight added.

    """

    def __init__(self, record):
        self.weight = float(record[7])
        super(CherenkovDataThin, self).__init__(record)
