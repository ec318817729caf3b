from setuptools import find_packages, setup

setup(
    name="lispread",
    version="0.1",
    packages=find_packages("src"),
    package_dir={"": "src"},
    license="MIT License",
    description="A generic S-expression reader parameterized over its host data model",
    python_requires=">=3.9",
    install_requires=[
        "attrs>=22.2.0",
        "pyrsistent>=0.18.0",
        "typing_extensions>=4.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
