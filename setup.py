from setuptools import setup, find_packages
import re

# Read version from taxcal/__init__.py
with open('taxcal/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='taxcal',
    version=version,
    packages=find_packages(include=['taxcal', 'taxcal.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
            'mcp[cli]>=1.0.0,<2',
        ],
    },
    entry_points={
        'console_scripts': [
            'taxcal=taxcal.cli.__main__:main',
            'taxcal-mcp=taxcal.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Per-country income tax rules and salary tax calculation.',
    python_requires='>=3.10',
)
