#!/usr/bin/env python3

import pathlib

import setuptools


HERE = pathlib.Path(__file__).resolve().parent
with HERE.joinpath("src/twitchlink/version.py").open(encoding="utf-8") as fp:
    exec(fp.read())
with HERE.joinpath("README.md").open(encoding="utf-8") as fp:
    long_description = fp.read()

setuptools.setup(
    name="twitchlink",
    version=__version__,
    description="Resolve direct media URLs of live Twitch streams",
    long_description=long_description,
    long_description_content_type="text/markdown",
    python_requires=">=3.6",
    license="MIT",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Multimedia :: Video",
    ],
    keywords="twitch HLS streaming m3u8 mpv",
    package_dir={"": "src"},
    packages=["twitchlink"],
    install_requires=["appdirs", "click", "requests"],
    extras_require={"dev": ["black", "flake8", "mypy", "pylint", "pytest", "tox"]},
    entry_points={"console_scripts": ["twitchlink=twitchlink.twitchlink:main"]},
)
