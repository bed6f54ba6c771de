from setuptools import setup, find_packages

setup(
    name='docsearch',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'numpy>=1.21.0',
        'click>=8.0.0',
        'rich>=12.0.0',
    ],
    extras_require={
        'test': ['pytest>=7.0.0'],
    },
    entry_points={
        'console_scripts': [
            'docsearch=docsearch.cli:cli',
        ],
    },
    python_requires='>=3.7',
)
