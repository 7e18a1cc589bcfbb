# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="vexplorer",
    version="1.0.0",
    description="Virtual file explorer: import a folder, edit it as an in-memory tree, export it back",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["vexplorer*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'vexplorer=vexplorer.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
