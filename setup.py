"""
Setup script for the peer-arcade package.

Installs the ``peer_arcade`` package from src/ together with the SQL
schema used by the room registry and game history stores.
"""

from setuptools import setup, find_packages

setup(
    name="peer-arcade",
    version="1.0.0",
    description="Peer Arcade - serverless multiplayer rooms for Caro, Battleship, Uno and Memory",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "pytest>=7.0",
            "build",
            "wheel",
        ],
    },
    package_data={
        "peer_arcade._shared": ["schema.sql"],
    },
    entry_points={
        "console_scripts": [
            "peer-arcade=peer_arcade.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
