# -*- coding: utf-8 -*-
# Licensed under the 2-clause BSD License

from setuptools import setup, find_packages

package_name = "image_archiver"

packages = find_packages(exclude=["tests", "*.tests"])

install_reqs = [
    "loguru",
    "notifiers",
    "paramiko>=3.0",
    "pydantic>=2.0",
    "pydantic-settings",
]

test_reqs = [
    "pytest",
]

setup(
    name=package_name,
    version="1.0.0",
    license="BSD",
    description="Archive image folders of digitization processes to a remote server over SFTP",
    long_description="""\
Uploads the image folder of a digitization workflow process to an archive
server over SFTP, into <process id>/images/<folder name>. Once uploaded, it can
write an archive manifest next to the folder and delete the local copy, or
leave both for a later run.
""",
    python_requires=">=3.10",
    install_requires=install_reqs,
    tests_require=test_reqs,
    packages=packages,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Topic :: System :: Archiving",
    ],
    extras_require={
        "test": test_reqs,
    },
    entry_points={"console_scripts": ["archive-image-folder=image_archiver.cli:main"]},
    include_package_data=True,
    zip_safe=False,
)
