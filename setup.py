"""
setup.py for the Voice Data Grid package.

Usage:
    pip install -e .[test]
"""
from setuptools import find_packages, setup

about = {}
with open("voicegrid/__version__.py") as f:
    exec(f.read(), about)

setup(
    name="voicegrid",
    version=about["__version__"],
    description="Voice-driven 24-cell data grid with keyboard and mouse fallback",
    packages=find_packages(include=["voicegrid", "voicegrid.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "pygame",
        "PyYAML",
        "pydantic>=2",
        "python-dotenv",
        "requests",
        "sounddevice",
        "webrtcvad",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "voicegrid=voicegrid.app:main",
        ],
    },
)
