from setuptools import setup, find_packages

setup(
    name="i2crw",
    version="0.1.0",
    description="Read and write I2C chips (EDID EEPROMs) from binary files",
    author="Pierre-Olivier Vauboin",
    author_email="po@lambdaconcept.com",
    packages=find_packages(),
    python_requires=">=3.7",
    install_requires=[
        "pyserial",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "rw-i2c = i2crw.cli:main",
        ],
    },
)
