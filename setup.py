"""
Setup script for the RFQ Capacity Planner
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read requirements
requirements = []
req_file = Path(__file__).parent / "requirements.txt"
if req_file.exists():
    with open(req_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                requirements.append(line)

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = ""
if readme_file.exists():
    with open(readme_file) as f:
        long_description = f.read()

setup(
    name="rfq-capacity",
    version="1.0.0",
    author="RFQ Capacity Planner",
    description="Weekly capacity load analysis for manufacturing quotations",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["rfq_capacity", "rfq_capacity.*"]),
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        'test': [
            'pytest>=7.4',
            'httpx>=0.25',
        ],
    },
    python_requires=">=3.10",
    entry_points={
        'console_scripts': [
            'rfq-capacity=rfq_capacity.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Manufacturing",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business",
    ],
)
