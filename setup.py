"""Setup configuration for Sahay - Offline Advice Assistant"""

from pathlib import Path

from setuptools import setup, find_packages

readme = Path(__file__).parent / "README.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""

setup(
    name="sahay",
    version="0.1.0",
    author="Sahay Contributors",
    description="Sahay — offline emergency, health, plant and women's health advice",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"sahay": ["data/*.json"]},
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.31.0",
        "numpy>=1.24.0",
        "Pillow>=10.0.0",
        "colorama>=0.4.6",
    ],
    extras_require={
        "voice": ["SpeechRecognition>=3.10.0", "PyAudio>=0.2.13"],
        "camera": ["opencv-python>=4.8.0"],
        "test": ["pytest>=7.4.0"],
    },
    entry_points={
        "console_scripts": [
            "sahay=sahay.cli:main",
        ],
    },
)
