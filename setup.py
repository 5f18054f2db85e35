"""
Setup configuration for the Technician Assignment Engine
Enables the project to be installed as a Python package
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8') if (this_directory / "README.md").exists() else ""

# Core dependencies
core_requirements = [
    'numpy>=1.24.0',
    'pandas>=2.0.0',
    'pyyaml>=6.0.0',
    'python-dotenv>=1.0.0',
]

# Optional dependencies
extras_require = {
    'dev': [
        'pytest>=7.4.0',
        'pytest-cov>=4.1.0',
        'black>=23.7.0',
        'flake8>=6.0.0',
        'mypy>=1.4.0',
        'isort>=5.12.0',
    ],
}

extras_require['test'] = ['pytest>=7.4.0', 'pytest-cov>=4.1.0']

# Package metadata
setup(
    name='technician-assignment-engine',
    version='1.0.0',
    author='Service Operations Team',
    description='Skill- and workload-aware assignment of repair work orders to service technicians',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',

    # Package discovery
    packages=find_packages(where='src') + ['config'],
    package_dir={'': 'src', 'config': 'config'},

    # Include non-Python files
    include_package_data=True,
    package_data={
        'config': ['*.yaml', '*.yml'],
    },

    # Python version requirement
    python_requires='>=3.8',

    # Dependencies
    install_requires=core_requirements,
    extras_require=extras_require,

    # Classifiers for PyPI
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],

    keywords='work-orders technician-assignment scheduling vehicle-service',

    # Additional options
    zip_safe=False,  # Don't install as zip file
)
