"""
Setup configuration for the Equipment Maintenance Prioritization System
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
    'pandas>=2.1.0',
    'scipy>=1.11.0',
    'openpyxl>=3.1.0',
    'pyyaml>=6.0.0',
    'python-dotenv>=1.0.0',
    'colorlog>=6.7.0',
]

# Optional dependencies
extras_require = {
    'dev': [
        'pytest>=7.4.0',
        'pytest-cov>=4.1.0',
        'black>=23.7.0',
        'flake8>=6.0.0',
        'isort>=5.12.0',
    ],
}

# All extras combined
extras_require['all'] = list(set(sum(extras_require.values(), [])))

# Package metadata
setup(
    name='equipment-maintenance-prioritization',
    version='1.0.0',
    author='Maintenance Analytics Team',
    author_email='maintenance-analytics@example.com',
    description='Ranks equipment for maintenance from historical work order records',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',

    # Package discovery
    packages=find_packages(include=['src', 'src.*', 'config', 'scripts']),

    # Include non-Python files
    include_package_data=True,
    package_data={
        'config': ['*.yaml', '*.yml'],
    },

    # Python version requirement
    python_requires='>=3.9',

    # Dependencies
    install_requires=core_requirements,
    extras_require=extras_require,

    # Entry points for CLI commands
    entry_points={
        'console_scripts': [
            'equipment-prioritize=scripts.prioritize_equipment:main',
        ],
    },

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Manufacturing',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Information Analysis',
    ],

    # Testing
    test_suite='tests',

    # Additional options
    zip_safe=False,
)
