from setuptools import setup

setup(
    name="prereq",
    version="0.1.0",
    description="Store and query requirements between objects",
    license="MIT",
    packages=["prereq", "prereq.templates"],
    python_requires=">=3.8",
    install_requires=[
        "Jinja2>=3,<4",
        "PyYAML>=5.1",
        "python-slugify>=4",
        "watchdog>=2",
    ],
    extras_require={"test": ["pytest>=7"]},
    package_data={"prereq.templates": ["*.jinja"]},
    entry_points={"console_scripts": ["prq = prereq.cli:main"]},
)
