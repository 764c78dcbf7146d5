#!/usr/bin/env python
# -*- coding: utf-8 -*-
from setuptools import setup

with open('README.md', encoding='utf8') as readme_file:
    readme = readme_file.read()

with open('pathexec/VERSION', encoding='utf8') as version_file:
    version = version_file.read().strip()


setup(
    name='pathexec',
    version=version,
    description="Discovers the executables reachable through PATH and caches them as completion candidates.",
    long_description=readme,
    long_description_content_type="text/markdown",
    author="pathexec contributors",
    packages=[
        'pathexec',
        'pathexec.config',
        'pathexec.filesystem',
    ],
    package_dir={'pathexec': 'pathexec'},
    package_data={'pathexec': ['VERSION']},
    entry_points={
        'console_scripts': [
            'pathexec=pathexec.cli:cli'
        ]
    },
    include_package_data=True,
    install_requires=[
        'Click>=8.0',
        'typer>=0.9',
        'rich',
        'watchdog>=3.0',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    python_requires=">=3.9",
    license="MIT license",
    zip_safe=False,
    keywords='path executables completion',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ]
)
