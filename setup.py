from pathlib import Path

from setuptools import find_packages, setup

setup(
    name='airshower',
    version='1.0.0',
    packages=find_packages(include=['airshower', 'airshower.*']),
    license='GPLv3',
    description='Readers for CORSIKA air shower simulation output',
    long_description=(Path(__file__).parent / 'README.rst').read_text(),
    keywords=['CORSIKA', 'air showers', 'cosmic rays', 'Cherenkov'],
    classifiers=[
        'Intended Audience :: Science/Research',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Physics',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
    ],
    python_requires='>=3.8',
    install_requires=['numpy', 'progressbar2>=3.50.0'],
    extras_require={'dev': ['Sphinx', 'ruff', 'coverage', 'pytest', 'mock'],
                    'test': ['pytest', 'mock']},
)
