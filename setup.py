from setuptools import setup, find_packages

setup(
    name="aethercast",
    version="0.1.0",
    description="AetherCast - Spell language compiler and reality simulation engine",
    author="Your Name",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        # Core data modeling and validation
        "pydantic>=2.0.0",

        # Environment variables
        "python-dotenv>=1.0.0",

        # CLI and rich output
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "aethercast = aethercast_engine.cli:main",
        ],
    },
    python_requires=">=3.11",
    package_dir={"": "."},
)
