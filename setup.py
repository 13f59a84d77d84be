"""Python setup.py for oci_shape_resolver package"""
import io
import os
from setuptools import find_packages, setup


def read(*paths, **kwargs):
    """Read the contents of a text file safely.
    >>> read("oci_shape_resolver", "VERSION")
    '0.1.0'
    >>> read("README.md")
    ...
    """

    content = ""
    with io.open(
        os.path.join(os.path.dirname(__file__), *paths),
        encoding=kwargs.get("encoding", "utf8"),
    ) as open_file:
        content = open_file.read().strip()
    return content


def read_requirements(path):
    return [
        line.strip()
        for line in read(path).split("\n")
        if line.strip() and not line.startswith(('"', "#", "-", "git+"))
    ]


setup(
    name="oci_shape_resolver",
    version=read("oci_shape_resolver", "VERSION"),
    description="Resolves OCI instance pool shapes for autoscaler node templates",
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    author="oci-shape-resolver",
    packages=find_packages(exclude=["tests", ".github"]),
    package_data={"oci_shape_resolver": ["VERSION"]},
    install_requires=read_requirements("requirements.txt"),
    entry_points={
        "console_scripts": [
            "oci-shape-resolver = oci_shape_resolver.__main__:main"
        ]
    },
    extras_require={"test": read_requirements("requirements-test.txt")},
)
