from setuptools import setup, find_packages

# Read version from __version__.py without importing the package
version_file = {}
with open("scoop_bucket/__version__.py") as fp:
    exec(fp.read(), version_file)
__version__ = version_file['__version__']

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

python_requires = ">=3.10"

install_requires = [
    "colorama",            # Colored PASS/FAIL report, ANSI on legacy Windows consoles
    "jsonschema",          # Manifest schema validation
    "pydantic>=2.0,<3.0",  # Validator configuration model
    "PyYAML>=6.0",         # .scoop-bucket.yaml
    "tomli>=1.1.0; python_version < '3.11'",  # pyproject.toml on Python 3.10
]

extras_require = {
    "test": [
        "pytest",
    ],
}

classifiers = [
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Operating System :: OS Independent",
]

setup(
    name="scoop-bucket",
    version=__version__,
    author="MeiZhong",
    description="Scoop bucket for WhisperJAV, with manifest and bucket validation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/meizhong986/WhisperJAV",
    license="MIT",
    packages=find_packages(include=["scoop_bucket", "scoop_bucket.*"]),
    classifiers=classifiers,
    python_requires=python_requires,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "scoop-bucket-validate=scoop_bucket.validation.__main__:main",
        ],
    },
    zip_safe=False,
)
