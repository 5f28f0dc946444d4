from pathlib import Path

from setuptools import setup, find_packages

# The directory containing this file
here = Path(__file__).parent

# The text of the README file
README = (here / "README.md").read_text()

requirements = (here / "requirements/base.in").read_text().splitlines()
test_requirements = (here / "requirements/test.in").read_text().splitlines()

setup(
    name="gauge-tasks",
    python_requires=">=3.10",
    version="0.1.0",
    description="Build, test & release tasks of the gauge javascript library",
    long_description=README,
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
    ],
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["gauge_tasks", "gauge_tasks.*"]),
    include_package_data=True,
    install_requires=requirements,
    extras_require={"test": test_requirements},
    entry_points={"console_scripts": ["gauge-tasks=gauge_tasks.app.main:main"]},
)
