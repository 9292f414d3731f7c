from setuptools import setup, find_packages


def readme():
    with open("README.md") as f:
        return f.read()


setup(
    name="quop",
    version="0.1.0",
    description="Symbolic algebra of spin, boson and fermion operators.",
    long_description=readme(),
    long_description_content_type="text/markdown",
    license="Apache",
    packages=find_packages(exclude=["deps", "tests*"]),
    install_requires=[
        "cytoolz>=0.8.0",
        "numpy>=1.17",
        "psutil>=4.3.1",
        "sympy>=1.9",
        "toolz>=0.8.0",
        "tqdm>=4",
    ],
    extras_require={
        "tests": [
            "coverage",
            "pytest",
            "pytest-cov",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    keywords="quantum physics operators hamiltonians lindblad jordan-wigner",
)
