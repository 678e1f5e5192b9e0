from setuptools import setup

setup(name='numerotator',
      version='0.1.0',
      description='IMGT numbering of antibody variable regions',
      author='The numerotator developers',
      packages=['numerotator'],
      package_dir={'numerotator': 'lib/python/numerotator'},
      package_data={'numerotator': ['dat/*']},
      include_package_data=True,
      scripts=['bin/NUMEROTATOR'],
      install_requires=['biopython>=1.80'],
      extras_require={'test': ['pytest']},
      python_requires='>=3.7',
     )
