from setuptools import setup, find_packages

setup(
    name="essai-control-panel",
    version="2.0.0",
    description="Essai Control Panel - A desktop viewer for the Essai machine-shop tool database",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="Essai",
    url="https://github.com/Uncreate/EssaiControlPanel",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "PyYAML>=6.0",
        "PyQt6>=6.0; python_version>='3.9'",
        "requests>=2.25.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "essai-cp=essai_cp.cli:main",
            "essai-cp-gui=essai_cp.main_gui:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Manufacturing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Environment :: X11 Applications :: Qt",
    ],
    python_requires=">=3.9",
)
