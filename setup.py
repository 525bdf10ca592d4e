"""Setup configuration for the BeliX caching and rate-limiting core."""

from setuptools import setup, find_packages

setup(
    name="belix",
    version="0.1.0",
    description="In-process caching and rate limiting for the BeliX community Discord bot",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "py-cord>=2.6",
        "PyYAML>=6.0",
        "prompt_toolkit>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
