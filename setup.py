from setuptools import find_packages, setup

setup(
    name="pyndnping",
    version="0.1.0",
    platforms=["any"],
    license="MIT",
    packages=find_packages(include=["pyping", "pyping.*"]),
    install_requires=[
        "click==8.1.7",
        "colorama==0.4.6",
        "pydantic==2.11.4",
    ],
    tests_require=[
        "pytest",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "pyping = pyping.main:cli",
            "ndnping = pyping.apps.client.cli:cli_run",
            "ndnpingserver = pyping.apps.server.cli:cli_run",
        ],
    },
    python_requires=">=3.11",
)
