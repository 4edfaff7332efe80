from typing import Sequence

from setuptools import find_packages, setup

VERSION = "0.3.0"


def get_requirements() -> Sequence[str]:
    with open("requirements.txt") as fp:
        return [
            x.strip()
            for x in fp.read().split("\n")
            if x.strip() and not x.startswith(("#", "--"))
        ]


setup(
    name="mysqlmon",
    version=VERSION,
    packages=find_packages(exclude=["tests", "tests.*"]),
    zip_safe=False,
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=get_requirements(),
    extras_require={"test": ["pytest>=7.0"]},
    entry_points={"console_scripts": ["mysqlmon=mysqlmon.cli:main"]},
)
