"""
EV Charge Scheduler
Charging optimization and reinforcement learning for electric vehicle fleets
"""

from setuptools import setup, find_packages
import os

# Read the contents of README file
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name="ev-charge-scheduler",
    version="1.0.0",
    author="Youssef Rekik",
    description="Priority-based charging optimization and Q-learning for electric vehicle fleets",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["ev_charging", "ev_charging.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pandas>=1.5.0",
        "numpy>=1.21.0",
        "python-dotenv>=1.0.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
        "tqdm>=4.65.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ev-charge-schedule=ev_charging.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
