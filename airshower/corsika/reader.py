""" Read CORSIKA data files.

    This provides functionality to read CORSIKA output files with
    `Python <www.python.org>`_, one shower and one particle at a time.
    It provides the following main classes:

    * :class:`~airshower.corsika.reader.CorsikaFile`: The file class
      detects the block layout and provides a scan over all showers in
      the file.
    * :class:`~airshower.corsika.reader.CorsikaShower`: The shower class
      that provides a scan over all particle (or Cherenkov bunch)
      records of one shower.

    The sub-blocks themselves are decoded by the classes in
    :mod:`~airshower.corsika.blocks`.

    Use like this::

        corsika_file = CorsikaFile('CER000001')
        for shower in corsika_file.get_showers():
            for particle in shower.get_particles():
                pass
            if not shower.good:
                pass  # the shower is incomplete
        if not corsika_file.good:
            print(corsika_file.error)


    Layouts
    =======

    Two physical block sizes are recognized: 22932 bytes (21 sub-blocks
    of 273 fields) and 26208 bytes (21 sub-blocks of 312 fields, used
    with thinning). Files written as Fortran unformatted records carry
    the block length before and after every block, files written
    without them start directly with the run header. The layout is
    found when the file is opened.


    Failures
    ========

    No method raises while reading. A failure sets ``good`` to False
    and stores the failure in ``error``, after which nothing is read
    anymore. Reaching the run end sets ``done`` instead. Use ``check()``
    to raise the stored failure.


    More Info
    =========

    For short information on fortran unformatted binary files, take a
    look at http://paulbourke.net/dataformats/reading/

    For detailed information on the CORSIKA format, check the 'Outputs'
    chapter in the CORSIKA user manual. In particular, check the 'Normal
    Particle Output' and 'Cherenkov Output' sections.

"""
import logging
import os
import struct

import numpy

from .blocks import (RunHeader, RunEnd, EventHeader, EventEnd,
                     CherenkovData, CherenkovDataThin, Format, FormatThin,
                     format_for_block_size, subblock_tag, RUN_HEADER, RUN_END,
                     EVENT_HEADER, EVENT_END, LONGITUDINAL)
from .errors import (OpenFailure, LayoutDetectionFailure, MissingSentinel,
                     TruncatedRead)
from ..utils import ERR, pbar

logger = logging.getLogger('airshower.corsika.reader')


class CorsikaShower(object):

    """One shower in a CORSIKA file

    The user never calls this. :meth:`CorsikaFile.next_shower` does,
    right before the event header sub-block, and hands over its
    ``next_subblock`` and ``rewind_subblock`` methods as the only way
    to read from the file.

    Only one shower of a file can be read at a time. When the file
    moves on to the next shower the previous one is released and
    returns no more particles.

    :param fetch: reads the next sub-block of the file.
    :param format: the Format of the file.
    :param good: False to create the empty shower returned at the end
                 of a file.
    :param rewind: moves the file back by one sub-block, used to leave
                   a sub-block that belongs to the next shower unread.

    """

    def __init__(self, fetch, format, good=True, rewind=None):
        self._fetch = fetch
        self._rewind = rewind
        self.format = format
        self.good = good
        self.done = False
        self.error = None
        self.n_particles_read = 0
        self._particle_index = 0
        self._current = None
        self._header = None
        self._end = None

        if not good:
            return

        try:
            self._header = EventHeader(self._fetch())
        except MissingSentinel as exc:
            self._fail(exc)
            return

        # Get first particle data sub-block
        subblock = self._fetch()
        if subblock is None:
            self._fail(TruncatedRead('Could not read the first particle '
                                     'sub-block of shower %d.' % self.id))
        elif subblock_tag(subblock) in (LONGITUDINAL, EVENT_END):
            self._finish(subblock)
        else:
            self._current = subblock

    def next_particle(self):
        """Get the next particle record

        The record is an array of 7 fields, 8 with thinning. The record
        is returned even when reading the sub-block after it fails or
        ends the shower, so check ``good`` and ``done`` after each
        record.

        :return: the record, or None when nothing is left to read.

        """
        if not self.good or self.done or self._current is None:
            return None

        width = self.format.fields_per_particle
        start = self._particle_index * width
        record = self._current[start:start + width]
        self._particle_index += 1
        self.n_particles_read += 1

        if self._particle_index == self.format.particles_per_subblock:
            self._particle_index = 0
            subblock = self._fetch()
            if subblock is None:
                self._current = None
                self._fail(TruncatedRead('After the particles of shower %d, '
                                         'could not read the next data '
                                         'sub-block!' % self.id))
            elif subblock_tag(subblock) in (LONGITUDINAL, EVENT_END):
                self._current = None
                self._finish(subblock)
            else:
                self._current = subblock

        return record

    def get_particles(self):
        """Generator over the particle records of the shower

        Use like this::

            for particle in shower.get_particles():
                pass

        :yield: each particle record, as returned by next_particle.

        """
        while True:
            record = self.next_particle()
            if record is None:
                break
            yield record

    def get_bunches(self):
        """Generator over the records as Cherenkov bunches

        :yield: CherenkovData, or CherenkovDataThin for thinned files.

        """
        if self.format is not None and self.format.thinning:
            bunch = CherenkovDataThin
        else:
            bunch = CherenkovData
        for record in self.get_particles():
            yield bunch(record)

    def get_header(self):
        """Get the Event Header

        :return: an instance of EventHeader, None if it was not read.

        """
        return self._header

    def get_end(self):
        """Get the Event end sub-block

        :return: an instance of EventEnd, None until the shower is done
                 or when the shower ended without one.

        """
        return self._end

    def check(self):
        """Raise the stored failure, if any"""

        if not self.good:
            raise self.error
        return True

    @property
    def number(self):
        return self._header_value('event_number')

    @property
    def id(self):
        return self.number

    @property
    def primary(self):
        return self._header_value('particle_id')

    @property
    def energy(self):
        return self._header_value('energy')

    @property
    def theta(self):
        return self._header_value('zenith')

    @property
    def phi(self):
        return self._header_value('azimuth')

    @property
    def flag_hadron_model_low(self):
        return self._header_value('flag_hadron_model_low')

    @property
    def flag_hadron_model_high(self):
        return self._header_value('flag_hadron_model_high')

    @property
    def thinning_energy_fraction_hadronic(self):
        return self._header_value('energy_fraction_thinning_hadronic')

    @property
    def thinning_energy_fraction_em(self):
        return self._header_value('energy_fraction_thinning_em')

    def observation_level(self, i=0):
        """Height of observation level i (cm)"""

        if self._header is None:
            return ERR[0]
        return self._header[47 + i]

    def _header_value(self, name):
        if self._header is None:
            return ERR[0]
        return getattr(self._header, name)

    def _finish(self, subblock):
        """Store the shower end, passing over longitudinal sub-blocks

        A shower ends at the first LONG or EVTE sub-block. After LONG
        sub-blocks the event end is looked for, a sub-block that is
        neither is left for the file to read.

        """
        while subblock_tag(subblock) == LONGITUDINAL:
            following = self._fetch()
            if following is None:
                self._fail(TruncatedRead('Could not read the event end of '
                                         'shower %d.' % self.id))
                return
            if subblock_tag(following) not in (LONGITUDINAL, EVENT_END):
                if self._rewind is not None:
                    self._rewind()
                logger.warning('Shower %d ended without an event end '
                               'sub-block.', self.id)
                self.done = True
                return
            subblock = following

        self._end = EventEnd(subblock)
        self.done = True

    def _release(self):
        self._fetch = None
        self._rewind = None
        self._current = None

    def _fail(self, error):
        self.good = False
        self.error = error
        logger.error('%s', error)


class CorsikaFile(object):

    """CORSIKA output file handler

    This class provides an interface for CORSIKA output files, both
    thinned and unthinned, with or without block length markers.
    Allowing you to get at the showers and particles in the file.

    """

    def __init__(self, filename):
        """CorsikaFile constructor

        :param filename: the filename of the CORSIKA data file

        """
        self._filename = filename
        self._file = None
        self._header = None
        self._end = None
        self._shower = None
        self._current_subblock = 0
        self.format = None
        self.sized = False
        self.good = True
        self.done = False
        self.eof = False
        self.error = None

        try:
            self._file = open(self._filename, 'rb')
        except OSError as exc:
            self._fail(OpenFailure('Could not open file %s: %s'
                                   % (self._filename, exc)))
            return

        if self._detect_layout():
            self._read_run_header_and_end()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Close the file, the current shower is released"""

        self._release_shower()
        if self._file is not None:
            self._file.close()
            self._file = None

    def check(self):
        """Check DAT file format

        Raise the stored failure if the file could not be opened or
        read. For files with block length markers also check that
        there is an integer number of blocks in the file and that the
        markers before and after each block are equal.

        The markers are read with a separate file handle, so the read
        position is not changed and a closed file can still be checked.

        """
        if not self.good:
            raise self.error
        if not self.sized:
            return True

        padding = self.format.block_padding_size
        block_size = self.format.block_size + 2 * padding
        try:
            with open(self._filename, 'rb') as data:
                size = os.fstat(data.fileno()).st_size
                if size % block_size != 0:
                    raise LayoutDetectionFailure(
                        'File "%s" does not have an integer number of '
                        'blocks!' % self._filename)
                for block in range(size // block_size):
                    data.seek(block * block_size)
                    head = struct.unpack('i', data.read(padding))[0]
                    data.seek((block + 1) * block_size - padding)
                    tail = struct.unpack('i', data.read(padding))[0]
                    if head != tail:
                        raise LayoutDetectionFailure(
                            'Block #%d is not right: (%d, %d)'
                            % (block, head, tail))
        except OSError as exc:
            raise OpenFailure('Could not open file %s: %s'
                              % (self._filename, exc))
        return True

    def next_subblock(self):
        """Read the next sub-block

        Block length markers are skipped at the physical block
        boundaries.

        :return: array with the fields of the sub-block, or None when
                 the file is exhausted (``eof`` is True) or could not
                 be read.

        """
        if not self.good or self._file is None or self.format is None:
            return None

        padding = self.format.block_padding_size
        try:
            if self._current_subblock == 0 and self.sized:
                self._file.read(padding)
            data = self._file.read(self.format.subblock_size)
            if len(data) < self.format.subblock_size:
                self.eof = True
                return None

            self._current_subblock += 1
            if self._current_subblock == self.format.subblocks_per_block:
                self._current_subblock = 0
                if self.sized:
                    self._file.read(padding)
        except OSError as exc:
            logger.error('Could not read a sub-block from %s: %s',
                         self._filename, exc)
            return None

        return self._decode(data)

    def rewind_subblock(self):
        """Move back to the start of the previously read sub-block"""

        if self._file is None or self.format is None:
            return

        position = self._file.tell()
        if position == 0:
            return
        padding = self.format.block_padding_size if self.sized else 0
        subblock_size = self.format.subblock_size

        if self._current_subblock == 0:
            position -= subblock_size + padding
            self._current_subblock = self.format.subblocks_per_block - 1
        elif self._current_subblock == 1:
            position -= subblock_size + padding
            self._current_subblock = 0
        else:
            position -= subblock_size
            self._current_subblock -= 1

        self._file.seek(max(position, 0))
        self.eof = False

    def next_shower(self):
        """Move on to the next shower

        :return: CorsikaShower positioned at its first particle. When the
                 run end is reached (``done``) or reading fails
                 (``good`` is False) a shower with ``good`` False is
                 returned.

        """
        self._release_shower()
        if not self.good or self.done:
            return CorsikaShower(None, self.format, good=False)

        while True:
            subblock = self.next_subblock()

            if subblock is None:
                if self.eof:
                    self._fail(TruncatedRead(
                        'Reached end of file %s before run end sub-block! '
                        'Was this simulation complete?' % self._filename))
                else:
                    self._fail(TruncatedRead(
                        'Could not read a sub-block of data from %s!'
                        % self._filename))
                return CorsikaShower(None, self.format, good=False)

            tag = subblock_tag(subblock)
            if tag == RUN_END:
                self.done = True
                self._end = RunEnd(subblock)
                logger.debug('Reached the run end of %s.', self._filename)
                return CorsikaShower(None, self.format, good=False)
            elif tag == EVENT_HEADER:
                break

        self.rewind_subblock()
        self._shower = CorsikaShower(self.next_subblock, self.format,
                                     rewind=self.rewind_subblock)
        return self._shower

    def get_showers(self, progress=False):
        """Generator over the good showers in the file

        This method is a generator over the showers in the file, it
        stops at the run end or at the first failure.
        Use it like this::

            for shower in my_file.get_showers():
                pass

        :param progress: if True, show a progressbar over the number of
                         showers given in the run header.

        """
        length = self.n_showers if self.n_showers > 0 else None
        return pbar(self._iter_showers(), length=length, show=progress,
                    max_error=False)

    def get_header(self):
        """Get the Run header

        :return: an instance of RunHeader, None if it could not be read.

        """
        return self._header

    def get_end(self):
        """Get the Run end

        :return: an instance of RunEnd, None if it could not be read.

        """
        return self._end

    @property
    def n_showers(self):
        """Number of showers according to the run header"""

        if self._header is None:
            return ERR[0]
        return self._header.n_showers

    @property
    def version(self):
        if self._header is None:
            return ERR[0]
        return self._header.version

    @property
    def date_start(self):
        if self._header is None:
            return ERR[0]
        return self._header.date_start

    @property
    def thinning(self):
        return self.format is not None and self.format.thinning

    @property
    def block_size(self):
        return self.format.block_size if self.format is not None else ERR[0]

    @property
    def words_per_subblock(self):
        if self.format is None:
            return ERR[0]
        return self.format.words_per_subblock

    def _iter_showers(self):
        while self.good and not self.done:
            shower = self.next_shower()
            if shower.good:
                yield shower

    def _detect_layout(self):
        """Learn how to read the file

        Files without block length markers start with the run header,
        the event header is looked for at the start of the second
        sub-block to learn the sub-block size. Other files start with
        the block length.

        """
        self._file.seek(0)
        word = self._file.read(struct.calcsize('i'))
        if len(word) < struct.calcsize('i'):
            self._fail(LayoutDetectionFailure('File %s is too short.'
                                              % self._filename))
            return False

        if word == RUN_HEADER:
            block_size = self._probe_block_size()
            if block_size is None:
                self._fail(LayoutDetectionFailure(
                    'Could not find the event header after the run header '
                    'in %s.' % self._filename))
                return False
        else:
            block_size = struct.unpack('i', word)[0]
            self.sized = True

        self.format = format_for_block_size(block_size)
        if self.format is None:
            self._fail(LayoutDetectionFailure(
                "I don't know how to read the file %s, block size %d. Is this "
                "a sane CORSIKA output file?" % (self._filename, block_size)))
            return False

        logger.debug('%s: block size %d, thinning %s, length markers %s.',
                     self._filename, block_size, self.format.thinning,
                     self.sized)
        return True

    def _probe_block_size(self):
        for format in (Format(), FormatThin()):
            self._file.seek(format.subblock_size)
            if self._file.read(format.field_size) == EVENT_HEADER:
                return format.block_size
        return None

    def _read_run_header_and_end(self):
        self._reset()
        try:
            self._header = RunHeader(self.next_subblock())
        except MissingSentinel:
            self._reset()
            self._fail(MissingSentinel('I could not read the run header for '
                                       'the file %s.' % self._filename))
            return

        # Go to the beginning of the last block and look for the run end
        padding = self.format.block_padding_size if self.sized else 0
        self._file.seek(0, os.SEEK_END)
        last_block = (self._file.tell() - self.format.block_size -
                      2 * padding)
        if last_block >= 0:
            self._file.seek(last_block)
            self._current_subblock = 0
            for _ in range(self.format.subblocks_per_block):
                subblock = self.next_subblock()
                if subblock is None:
                    break
                if subblock_tag(subblock) == RUN_END:
                    self._end = RunEnd(subblock)
                    break

        self._reset()
        if self._end is None:
            self._fail(MissingSentinel('I could not find the run end '
                                       'sub-block in the file %s.'
                                       % self._filename))

    def _decode(self, data):
        return numpy.frombuffer(data, dtype=self.format.dtype)

    def _reset(self):
        """Go to beginning of file and reset sub-block counter"""

        self._file.seek(0)
        self._current_subblock = 0
        self.eof = False

    def _release_shower(self):
        if self._shower is not None:
            self._shower._release()
            self._shower = None

    def _fail(self, error):
        self.good = False
        self.error = error
        logger.error('%s', error)
