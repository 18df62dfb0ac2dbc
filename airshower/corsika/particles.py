"""
Names for CORSIKA particle codes

Particle codes as specified in CORSIKA user manual, Table 4.  Primaries
are given by these codes in word 2 of the event header, nuclei as
``A x 100 + Z``::

    >>> from airshower.corsika import particles
    >>> particles.name(14)
    'proton'
    >>> particles.name(5626)
    'iron'
    >>> particles.name(1406)
    'carbon14'

"""
import re


def name(particle_id):
    """Get the name for a CORSIKA particle code

    :param particle_id: code for the particle
    :return: name of the particle. Nuclei get their mass number appended
             unless it is the most common isotope listed in ``ID``.
             None for codes that are neither.

    """
    particle_id = int(particle_id)
    try:
        return ID[particle_id]
    except KeyError:
        pass
    if 200 <= particle_id < 9900:
        atom = ATOMIC_NUMBER.get(particle_id % 100)
        if atom is not None:
            return atom + str(particle_id // 100)
    return None


def particle_id(name):
    """Get the CORSIKA particle code for a particle name

    :param name: name of the particle/nucleus, for nuclei the mass
                 number can be appended to the name, e.g. 'carbon14'.
    :return: CORSIKA code for the particle, None if unknown.

    """
    for pid, particle_name in ID.items():
        if name == particle_name:
            return pid
    atom = re.match(r'^([a-z]+)(\d+)$', name)
    if atom is not None:
        for z, atom_name in ATOMIC_NUMBER.items():
            if atom.group(1) == atom_name:
                return int(atom.group(2)) * 100 + z
    return None


ID = {1: 'gamma',
      2: 'positron',
      3: 'electron',
      5: 'muon_p',
      6: 'muon_m',
      7: 'pion_0',
      8: 'pion_p',
      9: 'pion_m',
      10: 'Kaon_0_long',
      11: 'Kaon_p',
      12: 'Kaon_m',
      13: 'neutron',
      14: 'proton',
      15: 'anti_proton',
      16: 'Kaon_0_short',
      25: 'anti_neutron',
      66: 'electron_neutrino',
      67: 'anti_electron_neutrino',
      68: 'muon_neutrino',
      69: 'anti_muon_neutrino',

      201: 'deuteron',
      301: 'tritium',
      302: 'helium3',
      402: 'alpha',
      703: 'lithium',
      904: 'beryllium',
      1105: 'boron',
      1206: 'carbon',
      1407: 'nitrogen',
      1608: 'oxygen',
      2010: 'neon',
      2412: 'magnesium',
      2713: 'aluminium',
      2814: 'silicon',
      3216: 'sulfur',
      4020: 'calcium',
      5626: 'iron',

      9900: 'cherenkov_photon'}

ATOMIC_NUMBER = {1: 'hydrogen',
                 2: 'helium',
                 3: 'lithium',
                 4: 'beryllium',
                 5: 'boron',
                 6: 'carbon',
                 7: 'nitrogen',
                 8: 'oxygen',
                 9: 'fluorine',
                 10: 'neon',
                 11: 'sodium',
                 12: 'magnesium',
                 13: 'aluminium',
                 14: 'silicon',
                 15: 'phosphorus',
                 16: 'sulfur',
                 17: 'chlorine',
                 18: 'argon',
                 19: 'potassium',
                 20: 'calcium',
                 21: 'scandium',
                 22: 'titanium',
                 23: 'vanadium',
                 24: 'chromium',
                 25: 'manganese',
                 26: 'iron',
                 27: 'cobalt',
                 28: 'nickel'}
