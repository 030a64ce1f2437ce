# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="ctkdecl",
    version="0.3.0",
    description="Declarative, hot-reloading customtkinter GUIs from JSON, JSON5, YAML, TOML or XML",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["ctkdecl*"]),
    python_requires=">=3.11",  # tomllib
    install_requires=[
        "customtkinter",
        "Pillow",
        "watchdog",
        "PyYAML",
        "json5",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'ctkdecl=ctkdecl.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
