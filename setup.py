from setuptools import setup, find_packages
import re

# Read version from staffcalc/__init__.py
with open('staffcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='staffcalc',
    version=version,
    packages=find_packages(include=['staffcalc', 'staffcalc.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'staff-calc=staffcalc.cli.__main__:main',
            'staff-calc-mcp=staffcalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Healthcare staffing pay package calculator and tracker.',
    python_requires='>=3.10',
)
