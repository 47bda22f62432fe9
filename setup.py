import setuptools
import os
import os.path


# Get the readme file
if os.path.isfile("README.md"):
    with open("README.md", "r") as fh:
        long_description = fh.read()
else:
    long_description = ""

setuptools.setup(
    name="tpbasis",
    version="0.1.0",
    description="Index arithmetic and operator embedding for tensor-product spaces",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    package_dir={
        "tpbasis": "tpbasis",
        "tpbasis.modeling": "tpbasis/modeling",
        "tpbasis.tools": "tpbasis/tools",
    },
    packages=[
        "tpbasis",
        "tpbasis.modeling",
        "tpbasis.tools",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "scipy",
        "numba",
    ],
    extras_require={
        "test": ["pytest"],
        "docs": ["sphinx", "sphinx_rtd_theme"],
    },
)
