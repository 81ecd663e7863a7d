from setuptools import find_packages, setup
from glob import glob

classes = """
    Development Status :: 3 - Alpha
    License :: OSI Approved :: BSD License
    Topic :: Software Development :: Libraries
    Topic :: Scientific/Engineering
    Topic :: Scientific/Engineering :: Bio-Informatics
    Programming Language :: Python :: 3
    Programming Language :: Python :: 3 :: Only
    Operating System :: Unix
    Operating System :: POSIX
    Operating System :: MacOS :: MacOS X
"""
classifiers = [s.strip() for s in classes.split('\n') if s]

description = ('Pair HMM read likelihoods with precision tiering.')


setup(name='pairhmm',
      version='0.1.0',
      license='BSD-3-Clause',
      description=description,
      packages=find_packages(),
      python_requires='>=3.8',
      install_requires=[
          'numpy',
          'pandas',
          'torch>=1.4',
          'numba',
      ],
      extras_require={
          'test': ['pytest'],
      },
      scripts=glob('scripts/*'),
      classifiers=classifiers,
      package_data={})
