# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""
Plexus build configuration.

Pure Python on top of NumPy; there are no extension modules to compile.

Build
-----
    pip install -e .                          # editable install
    pip install -e .[dev]                     # with test tooling
    python setup.py bdist_wheel               # wheel
"""
import os

from setuptools import setup, find_packages

# ── Package metadata ──
readme = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'README.md')
try:
    with open(readme, 'r', encoding='utf-8') as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = ''

setup(
    name='plexus',
    version='0.1.0',
    author='Pictofeed, LLC',
    author_email='engineering@pictofeed.io',
    description=(
        'Composable neural-network layers and combinators on NumPy'
    ),
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='Proprietary',

    packages=find_packages(include=['plexus', 'plexus.*']),

    python_requires='>=3.10',
    install_requires=[
        'numpy>=1.24',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
            'pytest-benchmark',
        ],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: Other/Proprietary License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
    ],
    zip_safe=False,
)
