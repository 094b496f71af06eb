#!/usr/bin/env python
from setuptools import setup, find_packages

requirements = []
try:
    with open('requirements.txt') as f:
        requirements = f.read().splitlines()
except IOError as e:
    print(e)

setup(
    name='lineslice',
    zip_safe=False,
    packages=find_packages(include=['lineslice', 'lineslice.*']),
    package_dir={},
    include_package_data=True,
    version="1.0",
    install_requires=requirements,
    extras_require={'test': ['pytest']},
    entry_points={"console_scripts": ["lineslice = lineslice.cli:cli"]},
    python_requires='>=3.8',
    license='Apache License 2.0',
    long_description_content_type='text/markdown',
    keywords=[
        'ocr training-data line-segmentation ground-truth'
    ],
    classifiers=[
        'Intended Audience :: Developers', 'Operating System :: OS Independent',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12'
    ], )
